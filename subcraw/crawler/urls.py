from __future__ import annotations

from urllib.parse import urlencode


def build_search_url(base_url: str, category: int, offset: int = 0) -> str:
    """Адрес страницы выдачи категории; нулевой offset не передаётся."""
    params: list[tuple[str, str]] = [
        ("source", "omega"),
        ("filter", f'{{"id":"category.id","value":"{category}","fixed":true}}'),
    ]
    if offset:
        params.append(("offset", str(offset)))
    return f"{base_url}?{urlencode(params)}"


def build_product_url(base_url: str, product_id: int) -> str:
    params = [
        ("id", str(product_id)),
        ("offerLimit", "1"),
        ("opn", ""),
        ("storeId", "nil"),
    ]
    return f"{base_url}?{urlencode(params)}"
