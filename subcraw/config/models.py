from __future__ import annotations

from pydantic import BaseModel, Field, HttpUrl, PositiveInt, field_validator

DEFAULT_SEARCH_URL = "https://mystique-v1-submarino.b2w.io/mystique/search"
DEFAULT_PRODUCT_URL = (
    "https://pdgnamedquery-v1-submarino.b2w.io/run-pdg/product-without-promotion/revision/8"
)


def _default_user_agents() -> list[str]:
    return [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/128.0.0.0 Safari/537.36"
    ]


class NetworkConfig(BaseModel):
    """Глобальные сетевые настройки."""

    request_timeout_sec: float = Field(default=15.0, gt=0)
    user_agents: list[str] = Field(default_factory=_default_user_agents)
    accept_language: str | None = None

    @field_validator("user_agents")
    @classmethod
    def _ensure_user_agents(cls, value: list[str]) -> list[str]:
        if not value:
            msg = "Нужно указать минимум один User-Agent"
            raise ValueError(msg)
        return value


class CatalogConfig(BaseModel):
    """Адреса поискового и карточного эндпоинтов каталога."""

    search_url: HttpUrl = Field(default=DEFAULT_SEARCH_URL, validate_default=True)
    product_url: HttpUrl = Field(default=DEFAULT_PRODUCT_URL, validate_default=True)


class PipelineConfig(BaseModel):
    """Размеры пула воркеров и очередей конвейера."""

    max_workers: int = Field(default=25, ge=2, le=200)
    max_offset: int = Field(default=480, ge=0)
    page_queue_size: PositiveInt = 10
    product_queue_size: PositiveInt = 10
    job_queue_size: PositiveInt = 30
    result_queue_size: PositiveInt = 50

    @property
    def max_pages_in_flight(self) -> int:
        # хотя бы один воркер всегда свободен для карточек товаров,
        # иначе страницы, упёршиеся в полную очередь товаров, блокируют пул
        return max(1, self.max_workers - 1)


class CrawlerConfig(BaseModel):
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
