from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class PhaseTracker:
    """Счётчик задач одной фазы конвейера, которые сейчас в работе.

    ``enter`` вызывается при постановке задачи фазы в очередь заданий,
    ``leave`` после завершения её обработчика, независимо от результата.
    Нулевой счётчик сам по себе ничего не гарантирует: ``wait_idle`` имеет
    смысл только после того, как источник задач фазы исчерпан и закрыт.
    """

    def __init__(self, name: str, max_in_flight: int | None = None) -> None:
        if max_in_flight is not None and max_in_flight < 1:
            raise ValueError("max_in_flight должен быть положительным")
        self.name = name
        self.max_in_flight = max_in_flight
        self._in_flight = 0
        self._entered_total = 0
        self._cond = threading.Condition()

    def enter(self) -> None:
        with self._cond:
            if self.max_in_flight is not None:
                while self._in_flight >= self.max_in_flight:
                    self._cond.wait()
            self._in_flight += 1
            self._entered_total += 1

    def leave(self) -> None:
        with self._cond:
            if self._in_flight <= 0:
                raise RuntimeError(f"Фаза {self.name}: leave() без парного enter()")
            self._in_flight -= 1
            self._cond.notify_all()

    def is_idle(self) -> bool:
        with self._cond:
            return self._in_flight == 0

    def wait_idle(self, timeout: float | None = None) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self._in_flight == 0, timeout=timeout)

    @contextmanager
    def track(self) -> Iterator[None]:
        self.enter()
        try:
            yield
        finally:
            self.leave()

    @property
    def in_flight(self) -> int:
        with self._cond:
            return self._in_flight

    @property
    def entered_total(self) -> int:
        with self._cond:
            return self._entered_total
