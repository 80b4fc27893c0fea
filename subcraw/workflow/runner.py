from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import typer
from dotenv import load_dotenv
from pydantic import ValidationError

from subcraw.config.errors import ConfigurationError
from subcraw.config.loader import load_config, validate_category
from subcraw.config.models import PipelineConfig
from subcraw.crawler.models import ProductRecord
from subcraw.crawler.pipeline import CrawlPipeline
from subcraw.logger import get_logger
from subcraw.network.catalog_client import CatalogClient
from subcraw.network.http_client_factory import HttpClientFactory
from subcraw.runtime import RuntimeContext

logger = get_logger(__name__)


@dataclass(slots=True)
class RunnerOptions:
    category: int | None
    config_path: Path | None = None
    workers: int | None = None


def _override_workers(settings: PipelineConfig, workers: int) -> PipelineConfig:
    try:
        return PipelineConfig.model_validate({**settings.model_dump(), "max_workers": workers})
    except ValidationError as exc:
        raise ConfigurationError(f"Некорректное число воркеров {workers}: {exc}") from exc


def format_record(record: ProductRecord) -> str:
    return f"{record.price:.2f};{record.name}"


def format_summary(context: RuntimeContext) -> str:
    return f"Готово: товаров={context.products_reported}, время={context.elapsed():.2f}s"


class CrawlRunner:
    """Высокоуровневый раннер: конфигурация, HTTP-клиент, конвейер и вывод."""

    def __init__(
        self,
        http_factory: HttpClientFactory | None = None,
        emit: Callable[[str], None] = typer.echo,
    ) -> None:
        self._http_factory = http_factory
        self._emit = emit
        self.latest_context: RuntimeContext | None = None

    def run(self, options: RunnerOptions) -> RuntimeContext:
        load_dotenv()
        category = validate_category(options.category)
        config = load_config(options.config_path)
        if options.workers:
            config.pipeline = _override_workers(config.pipeline, options.workers)

        context = RuntimeContext(
            run_id=str(uuid.uuid4()),
            started_at=datetime.now(timezone.utc),
            category=category,
            config=config,
        )
        self.latest_context = context
        logger.info(
            "Запуск обхода",
            extra={
                "run_id": context.run_id,
                "category": category,
                "workers": config.pipeline.max_workers,
            },
        )

        http_factory = self._http_factory or HttpClientFactory.from_network(
            config.network, max_connections=config.pipeline.max_workers
        )
        try:
            pipeline = CrawlPipeline(
                CatalogClient(http_factory.get()),
                config.pipeline,
                config.catalog,
            )
            for record in pipeline.run(category):
                context.register_product()
                self._emit(format_record(record))
        finally:
            http_factory.close()

        self._emit(format_summary(context))
        return context
