from __future__ import annotations

import threading
from typing import Callable

from subcraw.crawler.channel import Channel
from subcraw.crawler.models import ProductRecord
from subcraw.crawler.phase import PhaseTracker
from subcraw.crawler.tasks import FetchTask, PageTask, ProductTask
from subcraw.logger import get_logger

logger = get_logger(__name__)


class ShutdownCoordinator:
    """Переносит задачи фаз в общую очередь и закрывает очереди по порядку.

    Очередь товаров закрывается, когда очередь страниц вычитана и закрыта,
    а фаза страниц простаивает. Очередь заданий и поток результатов
    закрываются, когда то же выполнено для очереди и фазы товаров.
    """

    def __init__(
        self,
        *,
        page_queue: Channel[PageTask],
        product_queue: Channel[ProductTask],
        jobs: Channel[FetchTask],
        results: Channel[ProductRecord],
        page_phase: PhaseTracker,
        product_phase: PhaseTracker,
        on_close: Callable[[str], None] | None = None,
    ) -> None:
        self.page_queue = page_queue
        self.product_queue = product_queue
        self.jobs = jobs
        self.results = results
        self.page_phase = page_phase
        self.product_phase = product_phase
        self.on_close = on_close
        self.closed_events: list[str] = []
        self._events_lock = threading.Lock()
        self._threads: list[threading.Thread] = []

    def start(self) -> None:
        for name, target in (
            ("page-forwarder", self._forward_pages),
            ("product-forwarder", self._forward_products),
        ):
            thread = threading.Thread(target=target, name=name, daemon=True)
            thread.start()
            self._threads.append(thread)

    def join(self, timeout: float | None = None) -> None:
        for thread in self._threads:
            thread.join(timeout)

    def _forward_pages(self) -> None:
        for task in self.page_queue:
            self.page_phase.enter()
            self.jobs.put(task)
        self.page_phase.wait_idle()
        logger.debug("Фаза страниц завершена, закрываем очередь товаров")
        self._close(self.product_queue)

    def _forward_products(self) -> None:
        for task in self.product_queue:
            self.product_phase.enter()
            self.jobs.put(task)
        self.product_phase.wait_idle()
        logger.debug("Фаза товаров завершена, закрываем очередь заданий и результаты")
        self._close(self.jobs)
        self._close(self.results)

    def _close(self, channel: Channel) -> None:
        channel.close()
        with self._events_lock:
            self.closed_events.append(channel.name)
        if self.on_close:
            self.on_close(channel.name)
