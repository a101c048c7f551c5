from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from estate_api.search.filters import ListingFilters, ListingSort


class Direction(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class OrderBySimilarity:
    field: str
    term: str
    direction: Direction = Direction.DESC


OrderTerm = OrderBy | OrderBySimilarity
OrderSpec = tuple[OrderTerm, ...]

NEWEST_FIRST: OrderSpec = (OrderBy("id", Direction.DESC),)


def resolve_order(filters: ListingFilters) -> OrderSpec:
    """Pick the result ordering; the first applicable rule wins.

    1. an explicit price sort,
    2. a text search: site path ascending, best match first within a path,
    3. anything else, including an id search: newest first.

    Orderings that are not already by id end with ``id desc`` so equal
    keys page deterministically.
    """
    if filters.sort is not None:
        direction = Direction.ASC if filters.sort == ListingSort.LOWEST_PRICE else Direction.DESC
        return (OrderBy("price", direction), *NEWEST_FIRST)

    term = filters.fuzzy_term
    if term is not None:
        return (
            OrderBy("site_path", Direction.ASC),
            OrderBySimilarity("site_path", term, Direction.DESC),
            *NEWEST_FIRST,
        )

    return NEWEST_FIRST
