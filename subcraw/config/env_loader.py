from __future__ import annotations

import os
from typing import Iterable

from pydantic import ValidationError

from subcraw.config.errors import ConfigurationError
from subcraw.config.models import (
    DEFAULT_PRODUCT_URL,
    DEFAULT_SEARCH_URL,
    CatalogConfig,
    CrawlerConfig,
    NetworkConfig,
    PipelineConfig,
)


def load_config_from_env() -> CrawlerConfig:
    """Строит конфигурацию краулера на основе переменных окружения."""
    try:
        network = NetworkConfig(
            request_timeout_sec=_float("NETWORK_REQUEST_TIMEOUT_SEC", default=15.0),
            accept_language=os.getenv("NETWORK_ACCEPT_LANGUAGE") or None,
        )
        user_agents = _list("NETWORK_USER_AGENTS")
        if user_agents:
            network.user_agents = user_agents
        catalog = CatalogConfig(
            search_url=os.getenv("CATALOG_SEARCH_URL") or DEFAULT_SEARCH_URL,
            product_url=os.getenv("CATALOG_PRODUCT_URL") or DEFAULT_PRODUCT_URL,
        )
        pipeline = PipelineConfig(
            max_workers=_int("PIPELINE_MAX_WORKERS", default=25),
            max_offset=_int("PIPELINE_MAX_OFFSET", default=480),
            page_queue_size=_int("PIPELINE_PAGE_QUEUE_SIZE", default=10),
            product_queue_size=_int("PIPELINE_PRODUCT_QUEUE_SIZE", default=10),
            job_queue_size=_int("PIPELINE_JOB_QUEUE_SIZE", default=30),
            result_queue_size=_int("PIPELINE_RESULT_QUEUE_SIZE", default=50),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Некорректная конфигурация окружения: {exc}") from exc
    return CrawlerConfig(network=network, catalog=catalog, pipeline=pipeline)


def _int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Ожидается целое число в {name}") from exc


def _float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Ожидается число (float) в {name}") from exc


def _list(name: str, default: Iterable[str] | None = None) -> list[str]:
    value = os.getenv(name)
    if value is None:
        return list(default) if default is not None else []
    return [
        token.strip()
        for token in value.replace("\n", ",").split(",")
        if token.strip()
    ]
