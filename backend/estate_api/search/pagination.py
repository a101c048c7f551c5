"""Offset and page-count arithmetic for listing searches.

Inputs are not validated here; ``ListingFilters`` only admits positive
``page`` and ``limit`` values.

``total_pages`` is ``total // limit + 1``, so an exact multiple reports one
trailing empty page (10 rows at 5 per page gives 3 pages).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pagination:
    offset: int | None
    limit: int | None
    total_pages: int


def page_window(page: int | None, limit: int | None) -> tuple[int | None, int | None]:
    """``(offset, limit)`` for the retrieval query; ``(None, None)`` when unpaged."""
    if limit is None:
        return None, None
    if page is None:
        return 0, limit
    return (page - 1) * limit, limit


def total_pages(total_count: int, limit: int | None) -> int:
    if limit is None:
        return 1
    return total_count // limit + 1


def paginate(total_count: int, page: int | None, limit: int | None) -> Pagination:
    offset, window_limit = page_window(page, limit)
    return Pagination(
        offset=offset,
        limit=window_limit,
        total_pages=total_pages(total_count, limit),
    )
