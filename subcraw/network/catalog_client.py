from __future__ import annotations

import json
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from subcraw.crawler.models import PageResponse, ProductRecord, ProductResponse
from subcraw.logger import get_logger

logger = get_logger(__name__)

_Schema = TypeVar("_Schema", bound=BaseModel)


class FetchError(Exception):
    """Базовая ошибка загрузки одного документа каталога."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """Транспортная ошибка, таймаут или неуспешный HTTP-статус."""


class DecodeError(FetchError):
    """Тело ответа не соответствует ожидаемой JSON-схеме."""


class CatalogClient:
    """Загружает страницы выдачи и карточки товаров через переданный httpx.Client."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def fetch_page(self, url: str) -> PageResponse:
        return self._fetch(url, PageResponse)

    def fetch_product(self, url: str) -> ProductRecord:
        return self._fetch(url, ProductResponse).to_record()

    def _fetch(self, url: str, schema: type[_Schema]) -> _Schema:
        try:
            response = self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise NetworkError(f"Не удалось загрузить {url}: {exc}", url) from exc
        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"Ответ {url} не является JSON: {exc}", url) from exc
        try:
            document = schema.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f"Неожиданная структура ответа {url}: {exc}", url) from exc
        logger.debug("Загружен %s", url)
        return document

