from __future__ import annotations

import threading
from collections import deque
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class ChannelClosed(Exception):
    """Канал закрыт: запись запрещена, а при чтении данные закончились."""


class Channel(Generic[T]):
    """Ограниченная потокобезопасная очередь с явным закрытием.

    ``put`` блокируется, пока очередь заполнена; ``get`` блокируется, пока
    очередь пуста и не закрыта. После ``close`` оставшиеся элементы можно
    дочитать, новые записать нельзя.
    """

    def __init__(self, maxsize: int, name: str = "channel") -> None:
        if maxsize < 1:
            raise ValueError("Ёмкость канала должна быть положительной")
        self.maxsize = maxsize
        self.name = name
        self._items: deque[T] = deque()
        self._closed = False
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    def put(self, item: T) -> None:
        with self._not_full:
            while len(self._items) >= self.maxsize and not self._closed:
                self._not_full.wait()
            if self._closed:
                raise ChannelClosed(f"Запись в закрытый канал {self.name}")
            self._items.append(item)
            self._not_empty.notify()

    def get(self) -> T:
        with self._not_empty:
            while not self._items and not self._closed:
                self._not_empty.wait()
            if not self._items:
                raise ChannelClosed(f"Канал {self.name} закрыт и пуст")
            item = self._items.popleft()
            self._not_full.notify()
            return item

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def drained(self) -> bool:
        """Канал закрыт и из него прочитано всё."""
        with self._lock:
            return self._closed and not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except ChannelClosed:
                return
