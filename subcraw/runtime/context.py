from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime

from subcraw.config.models import CrawlerConfig


@dataclass(slots=True)
class RuntimeContext:
    """Общий контекст выполнения для всего запуска."""

    run_id: str
    started_at: datetime
    category: int
    config: CrawlerConfig
    products_reported: int = 0
    _started_monotonic: float = field(default_factory=time.monotonic, repr=False)

    def register_product(self) -> int:
        self.products_reported += 1
        return self.products_reported

    def elapsed(self) -> float:
        return time.monotonic() - self._started_monotonic
