from __future__ import annotations

import threading
from typing import Any, Callable

from subcraw.crawler.channel import Channel
from subcraw.crawler.phase import PhaseTracker
from subcraw.crawler.tasks import FetchTask
from subcraw.logger import get_logger

logger = get_logger(__name__)

Handler = Callable[[Any], None]


class WorkerPool:
    """Фиксированный пул потоков, разбирающих общую очередь заданий.

    Обработчик выбирается по типу задачи. Фаза задачи уже учтена при
    постановке в очередь, воркер лишь вызывает ``leave`` после обработчика.
    """

    def __init__(self, jobs: Channel[FetchTask], workers: int) -> None:
        if workers < 1:
            raise ValueError("Нужен минимум один воркер")
        self.jobs = jobs
        self.workers = workers
        self._routes: dict[type, tuple[Handler, PhaseTracker]] = {}
        self._threads: list[threading.Thread] = []

    def register(self, task_type: type, handler: Handler, phase: PhaseTracker) -> None:
        self._routes[task_type] = (handler, phase)

    def phase_for(self, task: FetchTask) -> PhaseTracker:
        return self._route(task)[1]

    def start(self) -> None:
        if self._threads:
            raise RuntimeError("Пул воркеров уже запущен")
        for index in range(self.workers):
            thread = threading.Thread(
                target=self._work,
                name=f"worker-{index}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        logger.debug("Запущено воркеров: %s", self.workers)

    def join(self, timeout: float | None = None) -> None:
        for thread in self._threads:
            thread.join(timeout)

    def _route(self, task: FetchTask) -> tuple[Handler, PhaseTracker]:
        try:
            return self._routes[type(task)]
        except KeyError:
            raise TypeError(f"Нет обработчика для задачи {type(task).__name__}") from None

    def _work(self) -> None:
        for task in self.jobs:
            handler, phase = self._route(task)
            try:
                handler(task)
            except Exception:
                logger.exception("Необработанная ошибка задачи %s", task.url)
            finally:
                phase.leave()
