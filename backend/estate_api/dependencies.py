from __future__ import annotations

from fastapi import Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from estate_api.database import get_db
from estate_api.models.enums import PurchaseStatus, SoldStatus
from estate_api.search.filters import INT32_MAX, INT32_MIN, ListingFilters, ListingSort
from estate_api.search.visibility import CallerIdentity
from estate_api.services import identity_service
from estate_api.utils.exceptions import (
    ForbiddenError,
    PoolExhaustedError,
    UnauthorizedError,
)


def listing_filters(
    s: str | None = Query(None, description="Listing id or free-text search"),
    province: str | None = Query(None),
    regency: str | None = Query(None),
    street: str | None = Query(None),
    building_type: str | None = Query(None),
    sold_status: SoldStatus | None = Query(None),
    purchase_status: PurchaseStatus | None = Query(None),
    developer_id: int | None = Query(None, ge=INT32_MIN, le=INT32_MAX),
    is_popular: bool | None = Query(None),
    page: int | None = Query(None, ge=1, le=INT32_MAX),
    limit: int | None = Query(None, ge=1, le=INT32_MAX),
    sort: ListingSort | None = Query(None),
) -> ListingFilters:
    return ListingFilters(
        s=s,
        province=province,
        regency=regency,
        street=street,
        building_type=building_type,
        sold_status=sold_status,
        purchase_status=purchase_status,
        developer_id=developer_id,
        is_popular=is_popular,
        page=page,
        limit=limit,
        sort=sort,
    )


def optional_identity(request: Request, db: Session = Depends(get_db)) -> CallerIdentity | None:
    """The caller, or ``None`` when anonymous. A failed role lookup is a 403."""
    try:
        return identity_service.resolve_caller(db, request.headers)
    except UnauthorizedError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except ForbiddenError as e:
        raise HTTPException(status_code=403, detail=str(e)) from e
    except PoolExhaustedError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


def required_identity(
    identity: CallerIdentity | None = Depends(optional_identity),
) -> CallerIdentity:
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity
