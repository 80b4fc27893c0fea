from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(slots=True)
class ErrorEvent:
    """Структурированное описание отброшенной задачи для логов."""

    error_type: str
    error_source: str
    phase: str | None = None
    url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error_type": self.error_type,
            "error_source": self.error_source,
            "timestamp": _now_iso(),
        }
        if self.phase:
            payload["phase"] = self.phase
        if self.url:
            payload["url"] = self.url
        if self.metadata:
            payload["details"] = self.metadata
        return payload


def build_error_event(
    *,
    error_type: str,
    error_source: str,
    phase: str | None = None,
    url: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Упрощённый фабричный метод для создания словаря события ошибки."""
    event = ErrorEvent(
        error_type=error_type,
        error_source=error_source,
        phase=phase,
        url=url,
        metadata=metadata or {},
    )
    return event.to_dict()
