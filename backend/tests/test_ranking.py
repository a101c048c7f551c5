"""Tests for result ordering resolution."""

from estate_api.search.filters import ListingFilters, ListingSort
from estate_api.search.ranking import (
    NEWEST_FIRST,
    Direction,
    OrderBy,
    OrderBySimilarity,
    resolve_order,
)


def test_default_is_newest_first():
    assert resolve_order(ListingFilters()) == NEWEST_FIRST


def test_lowest_price():
    order = resolve_order(ListingFilters(sort=ListingSort.LOWEST_PRICE))
    assert order[0] == OrderBy("price", Direction.ASC)
    assert order[-1] == OrderBy("id", Direction.DESC)


def test_highest_price():
    order = resolve_order(ListingFilters(sort=ListingSort.HIGHEST_PRICE))
    assert order[0] == OrderBy("price", Direction.DESC)


def test_explicit_sort_overrides_text_search():
    order = resolve_order(ListingFilters(s="canggu", sort=ListingSort.HIGHEST_PRICE))
    assert order[0] == OrderBy("price", Direction.DESC)
    assert not any(isinstance(term, OrderBySimilarity) for term in order)


def test_text_search_groups_by_site_path_then_similarity():
    order = resolve_order(ListingFilters(s="canggu"))
    assert order == (
        OrderBy("site_path", Direction.ASC),
        OrderBySimilarity("site_path", "canggu", Direction.DESC),
        OrderBy("id", Direction.DESC),
    )


def test_id_search_is_newest_first():
    assert resolve_order(ListingFilters(s="42")) == NEWEST_FIRST
