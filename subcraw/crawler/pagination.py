from __future__ import annotations

import math


def plan_page_count(limit: int, total: int, max_offset: int) -> int:
    """Сколько страниц выдачи нужно обойти после первой.

    Глубина ограничена и размером каталога, и собственным потолком
    ``max_offset``. При ``limit <= 0`` страниц нет.
    """
    if limit <= 0 or total <= limit:
        return 0
    possible_pages = math.ceil(total / limit)
    max_pages = max_offset // limit
    return max(0, min(possible_pages, max_pages))


def plan_offsets(limit: int, total: int, max_offset: int) -> list[int]:
    """Смещения дополнительных страниц: ``limit, 2*limit, ...``; нулевая уже загружена."""
    pages = plan_page_count(limit, total, max_offset)
    return [page * limit for page in range(1, pages + 1)]
