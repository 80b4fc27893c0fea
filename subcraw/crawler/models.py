from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Document(BaseModel):
    """JSON `null` в поле означает значение по умолчанию."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class PaginationMetadata(_Document):
    limit: int = 0
    offset: int = 0
    total: int = 0


class _ProductRef(_Document):
    id: int


class PageResponse(_Document):
    """Ответ поискового эндпоинта: метаданные пагинации и id товаров."""

    model_config = ConfigDict(populate_by_name=True)

    result: PaginationMetadata = Field(default_factory=PaginationMetadata, alias="_result")
    products: list[_ProductRef] = Field(default_factory=list)

    @property
    def product_ids(self) -> list[int]:
        return [product.id for product in self.products]


class _ProductInfo(_Document):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = ""
    name: str = ""


class _ProductResult(_Document):
    result: _ProductInfo = Field(default_factory=_ProductInfo)


class _Offer(_Document):
    sales_price: float = Field(default=0.0, alias="salesPrice")
    list_price: float = Field(default=0.0, alias="listPrice")


class _OfferList(_Document):
    offers: list[_Offer] = Field(default_factory=list)


class _OfferResult(_Document):
    result: _OfferList = Field(default_factory=_OfferList)


class ProductResponse(_Document):
    """Ответ карточного эндпоинта."""

    product: _ProductResult = Field(default_factory=_ProductResult)
    offer: _OfferResult = Field(default_factory=_OfferResult)

    def to_record(self) -> "ProductRecord":
        offers = self.offer.result.offers
        price = offers[0].sales_price if offers else 0.0
        info = self.product.result
        return ProductRecord(id=info.id, name=info.name, price=price)


@dataclass(slots=True, frozen=True)
class ProductRecord:
    id: str
    name: str
    price: float = 0.0


@dataclass(slots=True)
class CrawlMetrics:
    """Счётчики одного запуска; обновляются из потоков воркеров."""

    category: int
    pages_planned: int = 0
    pages_failed: int = 0
    products_found: int = 0
    products_failed: int = 0
    products_emitted: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def add(self, name: str, amount: int = 1) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return {
                "category": self.category,
                "pages_planned": self.pages_planned,
                "pages_failed": self.pages_failed,
                "products_found": self.products_found,
                "products_failed": self.products_failed,
                "products_emitted": self.products_emitted,
            }
