from __future__ import annotations

import random
import threading
import time
from typing import Iterable

import pytest

from subcraw.config.models import CatalogConfig, PipelineConfig
from subcraw.crawler.models import PageResponse, ProductRecord
from subcraw.crawler.pipeline import CrawlPipeline
from subcraw.crawler.urls import build_product_url, build_search_url
from subcraw.network.catalog_client import DecodeError, NetworkError

CATALOG = CatalogConfig(
    search_url="https://search.example/mystique/search",
    product_url="https://product.example/run-pdg/product",
)
SEARCH = str(CATALOG.search_url)
PRODUCT = str(CATALOG.product_url)


def _page(limit: int, total: int, ids: Iterable[int]) -> PageResponse:
    return PageResponse.model_validate(
        {
            "_result": {"limit": limit, "offset": 0, "total": total},
            "products": [{"id": product_id} for product_id in ids],
        }
    )


class FakeCatalog:
    def __init__(
        self,
        category: int,
        pages: dict[int, PageResponse | Exception],
        *,
        failing_products: dict[int, Exception] | None = None,
        max_delay: float = 0.0,
        seed: int = 0,
    ) -> None:
        self.pages = {
            build_search_url(SEARCH, category, offset): page for offset, page in pages.items()
        }
        self.failing_products = {
            build_product_url(PRODUCT, product_id): exc
            for product_id, exc in (failing_products or {}).items()
        }
        self.max_delay = max_delay
        self._random = random.Random(seed)
        self._lock = threading.Lock()
        self.page_calls: list[str] = []
        self.product_calls: list[str] = []

    def _sleep(self) -> None:
        if self.max_delay:
            with self._lock:
                delay = self._random.uniform(0, self.max_delay)
            time.sleep(delay)

    def fetch_page(self, url: str) -> PageResponse:
        with self._lock:
            self.page_calls.append(url)
        self._sleep()
        page = self.pages.get(url)
        if page is None:
            raise NetworkError(f"unexpected url {url}", url)
        if isinstance(page, Exception):
            raise page
        return page

    def fetch_product(self, url: str) -> ProductRecord:
        with self._lock:
            self.product_calls.append(url)
        self._sleep()
        if url in self.failing_products:
            raise self.failing_products[url]
        product_id = url.split("id=")[1].split("&")[0]
        return ProductRecord(id=product_id, name=f"Produto {product_id}", price=float(product_id))


def _collect(pipeline: CrawlPipeline, category: int, timeout: float = 10.0) -> list[ProductRecord]:
    records: list[ProductRecord] = []
    iterator = pipeline.run(category)

    def consume() -> None:
        records.extend(iterator)

    thread = threading.Thread(target=consume, daemon=True)
    thread.start()
    thread.join(timeout)
    assert not thread.is_alive(), "конвейер не завершился"
    return records


def _scenario_catalog(**kwargs) -> FakeCatalog:
    return FakeCatalog(
        123,
        {
            0: _page(2, 3, [1, 2]),
            2: _page(2, 3, [3]),
            4: _page(2, 3, []),
        },
        **kwargs,
    )


def test_end_to_end_scenario() -> None:
    catalog = _scenario_catalog()
    pipeline = CrawlPipeline(catalog, PipelineConfig(max_workers=4), CATALOG)

    records = _collect(pipeline, 123)

    assert {record.id for record in records} == {"1", "2", "3"}
    assert len(records) == 3
    assert sorted(catalog.page_calls) == sorted(
        build_search_url(SEARCH, 123, offset) for offset in (0, 2, 4)
    )
    assert pipeline.state == "finished"
    assert pipeline.metrics.snapshot() == {
        "category": 123,
        "pages_planned": 2,
        "pages_failed": 0,
        "products_found": 3,
        "products_failed": 0,
        "products_emitted": 3,
    }
    assert pipeline.coordinator.closed_events == ["product_queue", "jobs", "results"]


def test_failing_product_is_dropped_and_run_finishes() -> None:
    catalog = _scenario_catalog(
        failing_products={2: NetworkError("timed out", build_product_url(PRODUCT, 2))}
    )
    pipeline = CrawlPipeline(catalog, PipelineConfig(max_workers=3), CATALOG)

    records = _collect(pipeline, 123)

    assert {record.id for record in records} == {"1", "3"}
    assert pipeline.state == "finished"
    assert pipeline.metrics.products_failed == 1
    assert pipeline.page_phase.is_idle()
    assert pipeline.product_phase.is_idle()
    assert pipeline.product_phase.entered_total == 3


def test_failing_page_counts_as_empty() -> None:
    catalog = FakeCatalog(
        123,
        {
            0: _page(2, 3, [1, 2]),
            2: DecodeError("bad body", "page-2"),
            4: _page(2, 3, []),
        },
    )
    pipeline = CrawlPipeline(catalog, PipelineConfig(max_workers=2), CATALOG)

    records = _collect(pipeline, 123)

    assert {record.id for record in records} == {"1", "2"}
    assert pipeline.metrics.pages_failed == 1


def test_first_page_failure_is_fatal() -> None:
    catalog = FakeCatalog(123, {0: NetworkError("connection refused", "first")})
    pipeline = CrawlPipeline(catalog, PipelineConfig(max_workers=2), CATALOG)

    with pytest.raises(NetworkError):
        pipeline.run(123)
    assert pipeline.state == "bootstrapping"
    assert catalog.product_calls == []


def test_single_page_category_closes_without_page_tasks() -> None:
    catalog = FakeCatalog(7, {0: _page(50, 3, [10, 11, 12])})
    pipeline = CrawlPipeline(catalog, PipelineConfig(max_workers=2), CATALOG)

    records = _collect(pipeline, 7)

    assert sorted(record.id for record in records) == ["10", "11", "12"]
    assert len(catalog.page_calls) == 1


def test_overlapping_pages_are_not_deduplicated() -> None:
    catalog = FakeCatalog(
        9,
        {
            0: _page(2, 4, [1, 2]),
            2: _page(2, 4, [2, 3]),
            4: _page(2, 4, []),
        },
    )
    pipeline = CrawlPipeline(catalog, PipelineConfig(max_workers=2), CATALOG)

    records = _collect(pipeline, 9)

    assert sorted(record.id for record in records) == ["1", "2", "2", "3"]


@pytest.mark.parametrize("seed", range(5))
def test_queues_close_only_after_phases_are_idle(seed: int) -> None:
    limit, total = 5, 40
    pages: dict[int, PageResponse | Exception] = {0: _page(limit, total, range(1, 6))}
    for offset in range(limit, total + limit, limit):
        pages[offset] = _page(limit, total, range(offset + 1, offset + 1 + limit))
    catalog = FakeCatalog(55, pages, max_delay=0.003, seed=seed)
    settings = PipelineConfig(
        max_workers=3,
        page_queue_size=1,
        product_queue_size=1,
        job_queue_size=2,
        result_queue_size=1,
    )
    observed: list[tuple[str, int, int]] = []
    pipeline: CrawlPipeline

    def on_close(name: str) -> None:
        observed.append(
            (name, pipeline.page_phase.in_flight, pipeline.product_phase.in_flight)
        )

    pipeline = CrawlPipeline(catalog, settings, CATALOG, on_close=on_close)

    records = _collect(pipeline, 55, timeout=30)

    expected_pages = (total + limit - 1) // limit
    assert len(records) == limit * (expected_pages + 1)
    assert len({record.id for record in records}) == len(records)
    assert [name for name, _, _ in observed] == ["product_queue", "jobs", "results"]
    for name, page_in_flight, product_in_flight in observed:
        assert page_in_flight == 0, name
        if name in {"jobs", "results"}:
            assert product_in_flight == 0, name
