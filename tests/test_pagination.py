from __future__ import annotations

import pytest

from subcraw.crawler.pagination import plan_offsets, plan_page_count


def test_plan_offsets_capped_by_max_offset() -> None:
    offsets = plan_offsets(limit=50, total=1000, max_offset=480)
    assert offsets == [50, 100, 150, 200, 250, 300, 350, 400, 450]
    assert plan_page_count(50, 1000, 480) == 9


def test_plan_offsets_limited_by_catalog_size() -> None:
    assert plan_offsets(limit=2, total=3, max_offset=480) == [2, 4]


def test_zero_limit_plans_nothing() -> None:
    assert plan_offsets(limit=0, total=1000, max_offset=480) == []


@pytest.mark.parametrize("total", [0, 1, 49, 50])
def test_single_page_catalog_plans_nothing(total: int) -> None:
    assert plan_offsets(limit=50, total=total, max_offset=480) == []


def test_max_offset_below_limit_plans_nothing() -> None:
    assert plan_offsets(limit=50, total=1000, max_offset=40) == []


def test_plan_offsets_is_deterministic() -> None:
    first = plan_offsets(24, 10_000, 480)
    second = plan_offsets(24, 10_000, 480)
    assert first == second
    assert first == [24 * page for page in range(1, 21)]
