from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, Field

from estate_api.models.enums import PurchaseStatus, SoldStatus

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
# Ids and paging values are 32-bit integers, so an offset always fits in 64 bits
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class ListingSort(StrEnum):
    LOWEST_PRICE = "LowestPrice"
    HIGHEST_PRICE = "HighestPrice"


class ListingFilters(BaseModel):
    """Optional listing search parameters. ``None`` leaves a dimension unconstrained.

    ``page`` and ``limit`` must be positive 32-bit integers; the pagination
    arithmetic downstream assumes it.
    """

    s: str | None = None
    province: str | None = None
    regency: str | None = None
    street: str | None = None
    building_type: str | None = None
    sold_status: SoldStatus | None = None
    purchase_status: PurchaseStatus | None = None
    developer_id: int | None = Field(default=None, ge=INT32_MIN, le=INT32_MAX)
    is_popular: bool | None = None
    page: int | None = Field(default=None, ge=1, le=INT32_MAX)
    limit: int | None = Field(default=None, ge=1, le=INT32_MAX)
    sort: ListingSort | None = None

    model_config = {"frozen": True}

    @property
    def search_id(self) -> int | None:
        """The search term as a listing id, when it parses as an integer."""
        if self.s is None or not _INTEGER_RE.fullmatch(self.s):
            return None
        value = int(self.s)
        if not INT32_MIN <= value <= INT32_MAX:
            return None
        return value

    @property
    def fuzzy_term(self) -> str | None:
        """The search term when it should be matched by similarity."""
        if self.s is None or self.search_id is not None:
            return None
        return self.s
