from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(slots=True, frozen=True)
class PageTask:
    url: str
    offset: int


@dataclass(slots=True, frozen=True)
class ProductTask:
    url: str
    product_id: int


FetchTask = Union[PageTask, ProductTask]
