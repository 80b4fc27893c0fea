from __future__ import annotations

import random
from typing import Any, Dict

import httpx

from subcraw.config.models import NetworkConfig


class HttpClientFactory:
    """Создаёт один общий httpx.Client на запуск и закрывает его."""

    def __init__(self, *, base_kwargs: Dict[str, Any] | None = None, **kwargs: Any) -> None:
        if base_kwargs is not None and kwargs:
            raise ValueError("Используйте либо base_kwargs, либо именованные параметры, но не оба")
        if base_kwargs is not None:
            self._base_kwargs = dict(base_kwargs)
        else:
            self._base_kwargs = dict(kwargs)
        self._client: httpx.Client | None = None

    @classmethod
    def from_network(cls, network: NetworkConfig, *, max_connections: int) -> "HttpClientFactory":
        headers = {
            "User-Agent": random.choice(network.user_agents),
            "Accept": "application/json",
        }
        if network.accept_language:
            headers["Accept-Language"] = network.accept_language
        return cls(
            base_kwargs={
                "timeout": network.request_timeout_sec,
                "follow_redirects": True,
                "headers": headers,
                "limits": httpx.Limits(
                    max_connections=max_connections,
                    max_keepalive_connections=max_connections,
                ),
            }
        )

    def get(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(**self._base_kwargs)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
