"""Пакет конфигураций (модели и загрузчик)."""

from .errors import ConfigurationError
from .models import CatalogConfig, CrawlerConfig, NetworkConfig, PipelineConfig

__all__ = [
    "CatalogConfig",
    "ConfigurationError",
    "CrawlerConfig",
    "NetworkConfig",
    "PipelineConfig",
]
