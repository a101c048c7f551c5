"""Compose the retrieval and count queries for a listing search.

The filter predicates are folded once and shared by both queries. The only
intended difference is how a non-numeric search term is matched: the
retrieval query ranks by trigram similarity of the site path, while the
count query matches the title or street by substring.
"""

from __future__ import annotations

from dataclasses import dataclass

from estate_api.config import settings
from estate_api.models.enums import PurchaseStatus
from estate_api.search.filters import ListingFilters
from estate_api.search.predicates import (
    Contains,
    Equals,
    Predicate,
    Similar,
    and_,
    contains_text,
    or_,
)
from estate_api.search.ranking import OrderSpec


@dataclass(frozen=True)
class ListingQuery:
    where: Predicate
    # Keep one listing per distinct site_path
    distinct_site_path: bool = False
    order: OrderSpec = ()
    offset: int | None = None
    limit: int | None = None


def filter_predicates(filters: ListingFilters) -> list[Predicate]:
    """Predicates for every filter except the search term, in a fixed order."""
    predicates: list[Predicate] = []

    if filters.province is not None:
        predicates.append(Equals("province", filters.province.lower()))
    if filters.regency is not None:
        predicates.append(Equals("regency", filters.regency.lower()))
    if filters.street is not None:
        predicates.append(Equals("street", filters.street.lower()))
    if filters.is_popular is not None:
        predicates.append(Contains("configurations", "is_popular", filters.is_popular))
    if filters.sold_status is not None:
        predicates.append(Equals("sold_status", filters.sold_status.value))
    if filters.purchase_status is not None:
        predicates.append(
            or_(
                Equals("purchase_status", filters.purchase_status.value),
                Equals("purchase_status", PurchaseStatus.FOR_SALE_OR_RENT.value),
            )
        )
    if filters.building_type is not None:
        predicates.append(Equals("building_type", filters.building_type.lower()))
    if filters.developer_id is not None:
        predicates.append(Equals("developer_id", filters.developer_id))

    return predicates


def compose(
    visibility: Predicate,
    filters: ListingFilters,
    *,
    anonymous: bool = False,
    similarity_threshold: float | None = None,
) -> tuple[ListingQuery, ListingQuery]:
    """Build ``(retrieval, count)`` queries; ordering and paging are left unset."""
    if similarity_threshold is None:
        similarity_threshold = settings.search_similarity_threshold

    shared = filter_predicates(filters)
    search_id = filters.search_id
    fuzzy_term = filters.fuzzy_term

    if search_id is not None:
        retrieval_search = count_search = [Equals("id", search_id)]
    elif fuzzy_term is not None:
        retrieval_search = [Similar("site_path", fuzzy_term, similarity_threshold)]
        count_search = [
            or_(contains_text("title", fuzzy_term), contains_text("street", fuzzy_term))
        ]
    else:
        retrieval_search = count_search = []

    retrieval = ListingQuery(
        where=and_(visibility, *retrieval_search, *shared),
        distinct_site_path=anonymous and filters.s is not None,
    )
    count = ListingQuery(where=and_(visibility, *count_search, *shared))
    return retrieval, count
