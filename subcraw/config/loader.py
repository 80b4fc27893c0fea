from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from subcraw.config.env_loader import load_config_from_env
from subcraw.config.errors import ConfigurationError
from subcraw.config.models import CrawlerConfig
from subcraw.logger import get_logger

logger = get_logger(__name__)


def load_config(path: Path | None) -> CrawlerConfig:
    """Загружает конфигурацию из файла или из окружения."""
    if path:
        return _load_config_from_file(path)
    logger.debug("Конфигурация читается из переменных окружения")
    return load_config_from_env()


def _load_config_from_file(path: Path) -> CrawlerConfig:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        return CrawlerConfig.model_validate(data or {})
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Файл {path} не найден") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Файл {path} не является валидным YAML/JSON: {exc}") from exc
    except ValidationError as exc:
        raise ConfigurationError(f"Некорректная конфигурация: {exc}") from exc


def validate_category(category: int | None) -> int:
    """Категория каталога обязательна и должна быть положительным числом."""
    if category is None:
        raise ConfigurationError("Укажите категорию: --category <id>")
    if category <= 0:
        raise ConfigurationError(f"Категория должна быть положительным числом, получено {category}")
    return category
