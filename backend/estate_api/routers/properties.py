from __future__ import annotations

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from estate_api.database import get_db
from estate_api.dependencies import listing_filters, optional_identity, required_identity
from estate_api.models.agent import Agent
from estate_api.models.listing import Listing
from estate_api.schemas.agent import AgentResponse
from estate_api.schemas.listing import (
    AgentWithListings,
    ConfigurationsUpdate,
    FindListingsResponse,
    ListingPayload,
    ListingResponse,
    ListingWithAgent,
)
from estate_api.search.filters import INT32_MAX, INT32_MIN, ListingFilters
from estate_api.search.visibility import CallerIdentity
from estate_api.services import agent_service, listing_service
from estate_api.utils.exceptions import (
    ForbiddenError,
    NotFoundError,
    PoolExhaustedError,
    StoreError,
)

router = APIRouter(prefix="/properties")

ListingId = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]


def _raise_http(e: Exception, not_found_status: int = 404) -> NoReturn:
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=not_found_status, detail=str(e)) from e
    if isinstance(e, ForbiddenError):
        raise HTTPException(status_code=403, detail=str(e)) from e
    if isinstance(e, PoolExhaustedError):
        raise HTTPException(status_code=503, detail=str(e)) from e
    raise HTTPException(status_code=500, detail=str(e)) from e


def _with_agent(listing: Listing, agent: Agent) -> ListingWithAgent:
    return ListingResponse.model_validate(listing), AgentResponse.model_validate(agent)


@router.get("", response_model=FindListingsResponse)
def find_listings(
    filters: ListingFilters = Depends(listing_filters),
    identity: CallerIdentity | None = Depends(optional_identity),
    db: Session = Depends(get_db),
) -> FindListingsResponse:
    try:
        page = listing_service.find_listings(db, identity, filters)
    except (StoreError, PoolExhaustedError) as e:
        _raise_http(e)
    return FindListingsResponse(
        data=[_with_agent(listing, agent) for listing, agent in page.rows],
        total_data=page.total_data,
        total_pages=page.total_pages,
    )


@router.get("/agents", response_model=list[AgentResponse])
def list_agents(db: Session = Depends(get_db)) -> list[AgentResponse]:
    try:
        agents = agent_service.list_agents(db)
    except (StoreError, PoolExhaustedError) as e:
        _raise_http(e)
    return [AgentResponse.model_validate(a) for a in agents]


@router.get("/agents/{name}", response_model=AgentWithListings)
def find_listings_by_agent_name(name: str, db: Session = Depends(get_db)) -> AgentWithListings:
    try:
        agent, rows = listing_service.find_by_agent_name(db, name)
    except (NotFoundError, StoreError, PoolExhaustedError) as e:
        _raise_http(e)
    return AgentWithListings(
        agent=AgentResponse.model_validate(agent),
        properties=[_with_agent(listing, owner) for listing, owner in rows],
    )


@router.get("/related/{listing_id}", response_model=list[ListingWithAgent])
def find_related_listings(
    listing_id: ListingId,
    page: int | None = Query(None, ge=1, le=INT32_MAX),
    limit: int | None = Query(None, ge=1, le=INT32_MAX),
    db: Session = Depends(get_db),
) -> list[ListingWithAgent]:
    try:
        rows = listing_service.find_related(db, listing_id, page=page, limit=limit)
    except (NotFoundError, StoreError, PoolExhaustedError) as e:
        # A missing subject listing is reported as a server error on this path
        _raise_http(e, not_found_status=500)
    return [_with_agent(listing, agent) for listing, agent in rows]


@router.get("/site-paths", response_model=list[str])
def find_site_paths(db: Session = Depends(get_db)) -> list[str]:
    try:
        return listing_service.find_site_paths(db)
    except (StoreError, PoolExhaustedError) as e:
        _raise_http(e)


@router.post("", response_model=ListingResponse, status_code=201)
def create_listing(
    body: ListingPayload,
    identity: CallerIdentity = Depends(required_identity),
    db: Session = Depends(get_db),
) -> ListingResponse:
    try:
        listing = listing_service.create_listing(db, identity, body)
    except (StoreError, PoolExhaustedError) as e:
        _raise_http(e)
    return ListingResponse.model_validate(listing)


@router.put("/configurations/{listing_id}", response_model=ListingResponse)
def update_configurations(
    listing_id: ListingId,
    body: ConfigurationsUpdate,
    identity: CallerIdentity = Depends(required_identity),
    db: Session = Depends(get_db),
) -> ListingResponse:
    try:
        listing = listing_service.update_configurations(
            db, identity, listing_id, body.configurations
        )
    except (NotFoundError, ForbiddenError, StoreError, PoolExhaustedError) as e:
        _raise_http(e)
    return ListingResponse.model_validate(listing)


@router.get("/{listing_id}", response_model=ListingWithAgent)
def find_one_by_id(
    listing_id: ListingId,
    identity: CallerIdentity | None = Depends(optional_identity),
    db: Session = Depends(get_db),
) -> ListingWithAgent:
    try:
        listing, agent = listing_service.find_one_by_id(db, listing_id, identity)
    except (NotFoundError, StoreError, PoolExhaustedError) as e:
        # A missing listing is reported as a server error on this path
        _raise_http(e, not_found_status=500)
    return _with_agent(listing, agent)


@router.put("/{listing_id}", response_model=ListingResponse)
def update_listing(
    listing_id: ListingId,
    body: ListingPayload,
    identity: CallerIdentity = Depends(required_identity),
    db: Session = Depends(get_db),
) -> ListingResponse:
    try:
        listing = listing_service.update_listing(db, identity, listing_id, body)
    except (NotFoundError, ForbiddenError, StoreError, PoolExhaustedError) as e:
        _raise_http(e)
    return ListingResponse.model_validate(listing)


@router.delete("/{listing_id}")
def delete_listing(
    listing_id: ListingId,
    identity: CallerIdentity = Depends(required_identity),
    db: Session = Depends(get_db),
) -> dict:
    try:
        removed = listing_service.delete_listing(db, identity, listing_id)
    except (NotFoundError, ForbiddenError, StoreError, PoolExhaustedError) as e:
        _raise_http(e)
    return {"message": "Listing deleted", "id": listing_id, "removed": removed}
