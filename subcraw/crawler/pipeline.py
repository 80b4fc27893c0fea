from __future__ import annotations

import threading
from typing import Callable, Iterator, Literal

from subcraw.config.models import CatalogConfig, PipelineConfig
from subcraw.crawler.channel import Channel
from subcraw.crawler.coordinator import ShutdownCoordinator
from subcraw.crawler.models import CrawlMetrics, ProductRecord
from subcraw.crawler.pagination import plan_offsets
from subcraw.crawler.phase import PhaseTracker
from subcraw.crawler.pool import WorkerPool
from subcraw.crawler.stages import CatalogSource, PageStage, ProductStage
from subcraw.crawler.tasks import FetchTask, PageTask, ProductTask
from subcraw.crawler.urls import build_search_url
from subcraw.logger import get_logger

logger = get_logger(__name__)

PipelineState = Literal[
    "idle",
    "bootstrapping",
    "seeding",
    "paginating",
    "product_draining",
    "finished",
]


class CrawlPipeline:
    """Конвейер обхода одной категории: страницы выдачи, затем карточки товаров.

    ``run`` синхронно загружает первую страницу (ошибка здесь фатальна),
    запускает воркеры и возвращает итератор по записям в порядке готовности.
    """

    def __init__(
        self,
        client: CatalogSource,
        settings: PipelineConfig | None = None,
        catalog: CatalogConfig | None = None,
        *,
        on_close: Callable[[str], None] | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or PipelineConfig()
        self.catalog = catalog or CatalogConfig()
        self.on_close = on_close
        self.state: PipelineState = "idle"
        self._state_lock = threading.Lock()
        self.metrics: CrawlMetrics | None = None
        self.page_phase: PhaseTracker | None = None
        self.product_phase: PhaseTracker | None = None
        self.coordinator: ShutdownCoordinator | None = None

    def run(self, category: int) -> Iterator[ProductRecord]:
        self.metrics = metrics = CrawlMetrics(category=category)
        search_base = str(self.catalog.search_url)

        self._set_state("bootstrapping")
        first_page = self.client.fetch_page(build_search_url(search_base, category))
        meta = first_page.result
        offsets = plan_offsets(meta.limit, meta.total, self.settings.max_offset)
        metrics.add("pages_planned", len(offsets))
        logger.info(
            "Категория %s: limit=%s, total=%s, дополнительных страниц %s",
            category,
            meta.limit,
            meta.total,
            len(offsets),
        )

        page_queue: Channel[PageTask] = Channel(self.settings.page_queue_size, "page_queue")
        product_queue: Channel[ProductTask] = Channel(
            self.settings.product_queue_size, "product_queue"
        )
        jobs: Channel[FetchTask] = Channel(self.settings.job_queue_size, "jobs")
        results: Channel[ProductRecord] = Channel(self.settings.result_queue_size, "results")

        self.page_phase = PhaseTracker("page", max_in_flight=self.settings.max_pages_in_flight)
        self.product_phase = PhaseTracker("product")

        page_stage = PageStage(
            self.client, product_queue, str(self.catalog.product_url), metrics
        )
        product_stage = ProductStage(self.client, results, metrics)

        pool = WorkerPool(jobs, self.settings.max_workers)
        pool.register(PageTask, page_stage.handle, self.page_phase)
        pool.register(ProductTask, product_stage.handle, self.product_phase)

        self.coordinator = ShutdownCoordinator(
            page_queue=page_queue,
            product_queue=product_queue,
            jobs=jobs,
            results=results,
            page_phase=self.page_phase,
            product_phase=self.product_phase,
            on_close=self._handle_close,
        )

        self._set_state("seeding")
        # товары первой страницы считаются работой фазы страниц
        self.page_phase.enter()
        pool.start()
        self.coordinator.start()
        self._spawn("seeder", self._seed_products, page_stage, first_page.product_ids)
        self._spawn("planner", self._plan_pages, page_queue, search_base, category, offsets)
        return self._drain(results, pool)

    def _seed_products(self, page_stage: PageStage, product_ids: list[int]) -> None:
        try:
            page_stage.enqueue_products(product_ids)
        finally:
            self.page_phase.leave()

    def _plan_pages(
        self,
        page_queue: Channel[PageTask],
        search_base: str,
        category: int,
        offsets: list[int],
    ) -> None:
        try:
            for offset in offsets:
                page_queue.put(
                    PageTask(url=build_search_url(search_base, category, offset), offset=offset)
                )
        finally:
            page_queue.close()
        self._set_state("paginating", only_from="seeding")

    def _drain(
        self, results: Channel[ProductRecord], pool: WorkerPool
    ) -> Iterator[ProductRecord]:
        for record in results:
            self.metrics.add("products_emitted")
            yield record
        pool.join()
        self.coordinator.join()
        self._set_state("finished")
        logger.info("Обход завершён", extra=self.metrics.snapshot())

    def _handle_close(self, channel_name: str) -> None:
        if channel_name == "product_queue":
            self._set_state("product_draining")
        if self.on_close:
            self.on_close(channel_name)

    def _set_state(
        self, state: PipelineState, *, only_from: PipelineState | None = None
    ) -> None:
        with self._state_lock:
            if only_from is not None and self.state != only_from:
                return
            logger.debug("Состояние конвейера: %s -> %s", self.state, state)
            self.state = state

    @staticmethod
    def _spawn(name: str, target: Callable[..., None], *args: object) -> threading.Thread:
        thread = threading.Thread(target=target, args=args, name=name, daemon=True)
        thread.start()
        return thread
