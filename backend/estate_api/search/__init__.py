from estate_api.search.composer import ListingQuery, compose
from estate_api.search.filters import ListingFilters, ListingSort
from estate_api.search.pagination import Pagination, page_window, paginate, total_pages
from estate_api.search.ranking import resolve_order
from estate_api.search.visibility import CallerIdentity, resolve_visibility

__all__ = [
    "CallerIdentity",
    "ListingFilters",
    "ListingQuery",
    "ListingSort",
    "Pagination",
    "compose",
    "page_window",
    "paginate",
    "resolve_order",
    "resolve_visibility",
    "total_pages",
]
