from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from subcraw.config.errors import ConfigurationError
from subcraw.logger import configure_logging, get_logger
from subcraw.network.catalog_client import FetchError
from subcraw.workflow.runner import CrawlRunner, RunnerOptions

err_console = Console(stderr=True)
cli = typer.Typer(help="Обход категории каталога: цена и название каждого товара.")
logger = get_logger(__name__)

USAGE_HINT = "Укажите категорию: subcraw run --category <id>"


@cli.callback()
def main_callback() -> None:
    """Краулер каталога Submarino."""


@cli.command("run")
def run_crawler(
    category: Optional[int] = typer.Option(
        None,
        "--category",
        "-c",
        help="Идентификатор категории каталога (положительное целое).",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-w",
        min=2,
        envvar="PIPELINE_MAX_WORKERS",
        help="Число параллельных воркеров, не меньше 2 (по умолчанию 25).",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        envvar="CRAWLER_CONFIG_PATH",
        help="Путь к конфигурации (YAML/JSON). "
        "Если не указан, используется конфигурация из переменных окружения.",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="LOG_LEVEL",
        help="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL).",
    ),
) -> None:
    """Обходит одну категорию и печатает строку `<цена>;<название>` на товар."""
    configure_logging(log_level.upper())  # type: ignore[arg-type]
    runner = CrawlRunner()
    options = RunnerOptions(category=category, config_path=config_path, workers=workers)
    try:
        runner.run(options)
    except ConfigurationError as exc:
        err_console.print(f"[bold red]Ошибка конфигурации:[/bold red] {escape(str(exc))}")
        err_console.print(USAGE_HINT)
        raise typer.Exit(code=2) from exc
    except FetchError as exc:
        logger.error("Не удалось загрузить первую страницу категории", extra={"url": exc.url})
        err_console.print(f"[bold red]Обход прерван:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def entrypoint() -> None:
    """CLI entrypoint."""
    cli()
