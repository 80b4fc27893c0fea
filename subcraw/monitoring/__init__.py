"""Структурированные события ошибок для логов."""

from .error_events import ErrorEvent, build_error_event

__all__ = ["ErrorEvent", "build_error_event"]
