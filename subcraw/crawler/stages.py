from __future__ import annotations

from typing import Protocol

from subcraw.crawler.channel import Channel
from subcraw.crawler.models import CrawlMetrics, PageResponse, ProductRecord
from subcraw.crawler.tasks import PageTask, ProductTask
from subcraw.crawler.urls import build_product_url
from subcraw.logger import get_logger
from subcraw.monitoring import build_error_event
from subcraw.network.catalog_client import FetchError

logger = get_logger(__name__)


class CatalogSource(Protocol):
    def fetch_page(self, url: str) -> PageResponse: ...

    def fetch_product(self, url: str) -> ProductRecord: ...


class PageStage:
    """Обрабатывает страницу выдачи: каждый найденный id становится задачей товара."""

    def __init__(
        self,
        client: CatalogSource,
        product_queue: Channel[ProductTask],
        product_base_url: str,
        metrics: CrawlMetrics,
    ) -> None:
        self.client = client
        self.product_queue = product_queue
        self.product_base_url = product_base_url
        self.metrics = metrics

    def handle(self, task: PageTask) -> None:
        try:
            page = self.client.fetch_page(task.url)
        except FetchError as exc:
            self.metrics.add("pages_failed")
            logger.warning(
                "Страница выдачи пропущена: %s",
                exc,
                extra={
                    "url": task.url,
                    "error_event": build_error_event(
                        error_type=type(exc).__name__,
                        error_source="subcraw.crawler.stages.PageStage",
                        phase="page",
                        url=task.url,
                        metadata={"offset": task.offset},
                    ),
                },
            )
            return
        logger.debug("Offset %s: найдено товаров %s", task.offset, len(page.products))
        self.enqueue_products(page.product_ids)

    def enqueue_products(self, product_ids: list[int]) -> None:
        # блокируется на заполненной очереди товаров
        for product_id in product_ids:
            self.product_queue.put(
                ProductTask(
                    url=build_product_url(self.product_base_url, product_id),
                    product_id=product_id,
                )
            )
            self.metrics.add("products_found")


class ProductStage:
    """Загружает карточку товара и передаёт запись в поток результатов."""

    def __init__(
        self,
        client: CatalogSource,
        results: Channel[ProductRecord],
        metrics: CrawlMetrics,
    ) -> None:
        self.client = client
        self.results = results
        self.metrics = metrics

    def handle(self, task: ProductTask) -> None:
        try:
            record = self.client.fetch_product(task.url)
        except FetchError as exc:
            self.metrics.add("products_failed")
            logger.warning(
                "Карточка товара %s пропущена: %s",
                task.product_id,
                exc,
                extra={
                    "url": task.url,
                    "error_event": build_error_event(
                        error_type=type(exc).__name__,
                        error_source="subcraw.crawler.stages.ProductStage",
                        phase="product",
                        url=task.url,
                        metadata={"product_id": task.product_id},
                    ),
                },
            )
            return
        self.results.put(record)
