"""Listing search, lookups and writes.

Searches run the retrieval query and the count query as two separate round
trips. Without ``snapshot`` they may observe different states under
concurrent writes, so ``total_data`` can differ slightly from the rows a
client would page through. With ``snapshot`` (or ``settings.snapshot_reads``)
both queries share one REPEATABLE READ transaction on PostgreSQL.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from estate_api.config import settings
from estate_api.database import store_errors
from estate_api.models.agent import Agent
from estate_api.models.enums import AgentRole, PurchaseStatus, SoldStatus
from estate_api.models.listing import Listing
from estate_api.search.composer import compose
from estate_api.search.filters import ListingFilters
from estate_api.search.pagination import page_window, paginate
from estate_api.search.predicates import NotEquals, and_
from estate_api.search.ranking import resolve_order
from estate_api.search.sql import build_count, build_retrieval, render
from estate_api.search.visibility import (
    PUBLIC_VISIBILITY,
    CallerIdentity,
    resolve_visibility,
)
from estate_api.services import agent_service
from estate_api.utils.exceptions import ForbiddenError, ListingNotFoundError
from estate_api.utils.slugs import build_site_path, path_prefix

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from estate_api.schemas.listing import ListingPayload
    from estate_api.search.composer import ListingQuery

logger = logging.getLogger(__name__)

ListingRow = tuple[Listing, Agent]


@dataclass
class ListingPage:
    rows: list[ListingRow]
    total_data: int
    total_pages: int


# ── Search ────────────────────────────────────────────────────────────────


def _pin_snapshot(db: Session) -> None:
    if db.get_bind().dialect.name != "postgresql":
        return
    # Isolation can only be chosen when the transaction starts
    if db.in_transaction():
        db.commit()
    db.connection(execution_options={"isolation_level": "REPEATABLE READ"})


def _fetch_rows(db: Session, retrieval: ListingQuery) -> list[ListingRow]:
    return [(listing, agent) for listing, agent in build_retrieval(db, retrieval).all()]


def find_listings(
    db: Session,
    identity: CallerIdentity | None,
    filters: ListingFilters,
    *,
    snapshot: bool | None = None,
) -> ListingPage:
    """Search listings visible to ``identity``.

    Returns one page of ``(listing, agent)`` rows together with the total
    number of matching listings and the page count.
    """
    if snapshot is None:
        snapshot = settings.snapshot_reads

    retrieval, count = compose(
        resolve_visibility(identity), filters, anonymous=identity is None
    )
    offset, limit = page_window(filters.page, filters.limit)
    retrieval = replace(retrieval, order=resolve_order(filters), offset=offset, limit=limit)

    with store_errors():
        if snapshot:
            _pin_snapshot(db)
        rows = _fetch_rows(db, retrieval)
        total = build_count(db, count).scalar() or 0

    pagination = paginate(total, filters.page, filters.limit)
    logger.info(
        "Listing search: role=%s, search=%r, rows=%d, total=%d",
        identity.role if identity else "public",
        filters.s,
        len(rows),
        total,
    )
    return ListingPage(rows=rows, total_data=total, total_pages=pagination.total_pages)


def find_one_by_id(
    db: Session, listing_id: int, identity: CallerIdentity | None = None
) -> ListingRow:
    """A listing with its agent. Soft-deleted listings are visible to admins only."""
    with store_errors():
        query = (
            db.query(Listing, Agent)
            .join(Agent, Listing.user_id == Agent.id)
            .filter(Listing.id == listing_id)
        )
        if identity is None or not identity.is_admin:
            query = query.filter(Listing.is_deleted.is_(False))
        row = query.first()
    if row is None:
        raise ListingNotFoundError(f"Listing {listing_id} not found")
    listing, agent = row
    return listing, agent


def find_related(
    db: Session,
    listing_id: int,
    page: int | None = None,
    limit: int | None = None,
) -> list[ListingRow]:
    """Available listings on the same street as ``listing_id``, excluding it."""
    # The subject is resolved with public visibility, so a soft-deleted subject is not found
    subject, _ = find_one_by_id(db, listing_id)
    filters = ListingFilters(street=subject.street, page=page, limit=limit)

    visibility = and_(PUBLIC_VISIBILITY, NotEquals("id", subject.id))
    retrieval, _ = compose(visibility, filters)
    offset, window_limit = page_window(filters.page, filters.limit)
    retrieval = replace(
        retrieval, order=resolve_order(filters), offset=offset, limit=window_limit
    )

    with store_errors():
        return _fetch_rows(db, retrieval)


def find_by_agent_name(db: Session, name: str) -> tuple[Agent, list[ListingRow]]:
    """Listings of the agent whose name is given in URL form (``jane-doe``)."""
    agent = agent_service.get_by_name(db, name.replace("-", " "))
    identity = CallerIdentity(user_id=agent.id, role=AgentRole.AGENT)
    page = find_listings(db, identity, ListingFilters())
    return agent, page.rows


def find_site_paths(db: Session) -> list[str]:
    """Sitemap paths for every category level of the publicly visible listings."""
    paths = [
        f"/{PurchaseStatus.FOR_SALE.to_slug()}",
        f"/{PurchaseStatus.FOR_RENT.to_slug()}",
    ]
    visible = render(PUBLIC_VISIBILITY)
    levels = [
        (Listing.purchase_status, Listing.building_type),
        (Listing.purchase_status, Listing.building_type, Listing.province),
        (Listing.purchase_status, Listing.building_type, Listing.province, Listing.regency),
    ]

    with store_errors():
        for columns in levels:
            rows = db.query(*columns).filter(visible).distinct().order_by(*columns).all()
            for status, *segments in rows:
                paths.append(path_prefix(PurchaseStatus(status), *segments))

        site_paths = (
            db.query(Listing.site_path)
            .filter(visible)
            .distinct()
            .order_by(Listing.site_path.asc())
            .all()
        )
    paths.extend(site_path for (site_path,) in site_paths)
    return paths


# ── Writes ────────────────────────────────────────────────────────────────


def _payload_columns(payload: ListingPayload) -> dict[str, Any]:
    columns: dict[str, Any] = {
        "site_path": build_site_path(
            payload.purchase_status,
            payload.building_type,
            payload.province,
            payload.regency,
            payload.street,
        ),
        "title": payload.title,
        "description": payload.description,
        "province": payload.province.strip().lower(),
        "regency": payload.regency.strip().lower(),
        "street": payload.street.strip().lower(),
        "gmap_iframe": payload.gmap_iframe,
        "price": payload.price,
        "images": [image.model_dump() for image in payload.images],
        "purchase_status": payload.purchase_status.value,
        "measurements": payload.measurements.model_dump(),
        "building_type": payload.building_type.strip().lower(),
        "building_condition": payload.building_condition.value,
        "building_furniture_capacity": (
            payload.building_furniture_capacity.value
            if payload.building_furniture_capacity
            else None
        ),
        "building_certificate": (payload.building_certificate or "").lower(),
        "specifications": payload.specifications.model_dump(),
        "facilities": [facility.model_dump() for facility in payload.facilities],
        "sold_channel": payload.sold_channel.value if payload.sold_channel else None,
        "currency": payload.currency.value,
        "rent_time": payload.rent_time.value if payload.rent_time else None,
        "description_seo": payload.description_seo,
        "price_down_payment": payload.price_down_payment,
        "developer_id": payload.developer_id,
        "bank_id": payload.bank_id,
    }
    # An omitted status leaves the stored one untouched
    if payload.sold_status is not None:
        columns["sold_status"] = payload.sold_status.value
    return columns


def _get_for_write(db: Session, identity: CallerIdentity, listing_id: int) -> Listing:
    with store_errors():
        listing = db.query(Listing).filter(Listing.id == listing_id).first()
    if listing is None or (listing.is_deleted and not identity.is_admin):
        raise ListingNotFoundError(f"Listing {listing_id} not found")
    if not identity.is_admin and not identity.owns(listing.user_id):
        raise ForbiddenError("Forbidden")
    return listing


def create_listing(db: Session, identity: CallerIdentity, payload: ListingPayload) -> Listing:
    columns = _payload_columns(payload)
    columns.setdefault("sold_status", SoldStatus.AVAILABLE.value)
    listing = Listing(user_id=identity.user_id, **columns)
    with store_errors():
        db.add(listing)
        db.commit()
        db.refresh(listing)
    logger.info("Created listing %d (%s) for agent %s", listing.id, listing.site_path, identity.user_id)
    return listing


def update_listing(
    db: Session, identity: CallerIdentity, listing_id: int, payload: ListingPayload
) -> Listing:
    listing = _get_for_write(db, identity, listing_id)
    for key, value in _payload_columns(payload).items():
        setattr(listing, key, value)
    with store_errors():
        db.commit()
        db.refresh(listing)
    logger.info("Updated listing %d by %s", listing_id, identity.user_id)
    return listing


def delete_listing(db: Session, identity: CallerIdentity, listing_id: int) -> bool:
    """Remove a listing. Admins delete the row, agents only flag it.

    Returns True when the row was removed.
    """
    listing = _get_for_write(db, identity, listing_id)
    with store_errors():
        if identity.is_admin:
            db.delete(listing)
        else:
            listing.is_deleted = True
        db.commit()
    logger.info(
        "Deleted listing %d by %s (hard=%s)", listing_id, identity.user_id, identity.is_admin
    )
    return identity.is_admin


def update_configurations(
    db: Session,
    identity: CallerIdentity,
    listing_id: int,
    configurations: dict[str, Any],
) -> Listing:
    if not identity.is_admin:
        raise ForbiddenError("Only admins can change listing configurations")
    listing = _get_for_write(db, identity, listing_id)
    listing.configurations = dict(configurations)
    with store_errors():
        db.commit()
        db.refresh(listing)
    return listing

