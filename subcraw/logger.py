import logging
import os
from pathlib import Path
from typing import Literal, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_configured = False

# httpx пишет каждый запрос на INFO
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: LogLevel = "INFO") -> None:
    """Настраивает цветной логгер один раз за запуск.

    Логи пишутся в stderr: stdout занят строками результатов.
    """
    global _configured
    if not _configured:
        console = Console(stderr=True)
        handlers: list[logging.Handler] = [
            RichHandler(console=console, show_path=False, markup=False)
        ]
        file_handler = _build_file_handler(console)
        if file_handler:
            handlers.append(file_handler)
        logging.basicConfig(
            level=level,
            format="%(threadName)s %(message)s",
            datefmt="[%X]",
            handlers=handlers,
        )
        _configured = True
    else:
        logging.getLogger().setLevel(level)
    if level != "DEBUG":
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Возвращает готовый логгер модуля."""
    configure_logging()
    return logging.getLogger(name)


def _build_file_handler(console: Console) -> logging.Handler | None:
    """Создаёт файловый обработчик, если указан LOG_FILE_PATH."""
    log_path_str = os.getenv("LOG_FILE_PATH")
    if not log_path_str:
        return None
    try:
        log_path = Path(log_path_str).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(threadName)s %(name)s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        return handler
    except OSError as exc:
        message = escape(f"Не удалось настроить файловый логгер '{log_path_str}': {exc}")
        console.print(f"[yellow]{message}[/yellow]")
        return None
