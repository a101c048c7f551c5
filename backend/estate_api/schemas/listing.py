from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from estate_api.models.enums import (
    BuildingCondition,
    Currency,
    FurnitureCapacity,
    PurchaseStatus,
    RentTime,
    SoldChannel,
    SoldStatus,
)
from estate_api.schemas.agent import AgentResponse


class Image(BaseModel):
    is_cover: bool = False
    path: str
    english_label: str
    indonesian_label: str


class Measurements(BaseModel):
    land_area: int | None = None
    building_area: int | None = None
    building_level: int | None = None


class Specifications(BaseModel):
    bedrooms: int | None = None
    bathrooms: int | None = None
    garage: int | None = None
    carport: int | None = None
    electrical_power: int | None = None


class Facility(BaseModel):
    value: str
    indonesian_label: str


class ListingPayload(BaseModel):
    """Body of ``POST /properties`` and ``PUT /properties/{id}``."""

    title: str = Field(min_length=1, max_length=255)
    description: str
    province: str = Field(min_length=1, max_length=255)
    regency: str = Field(min_length=1, max_length=255)
    street: str = Field(min_length=1, max_length=255)
    gmap_iframe: str | None = None
    price: int = Field(ge=0)
    images: list[Image] = []
    purchase_status: PurchaseStatus
    sold_status: SoldStatus | None = None
    measurements: Measurements = Measurements()
    building_type: str = Field(min_length=1, max_length=255)
    building_condition: BuildingCondition
    building_furniture_capacity: FurnitureCapacity | None = None
    building_certificate: str | None = None
    specifications: Specifications = Specifications()
    facilities: list[Facility] = []
    sold_channel: SoldChannel | None = None
    currency: Currency
    rent_time: RentTime | None = None
    description_seo: str | None = None
    price_down_payment: int | None = Field(default=None, ge=0)
    developer_id: int | None = None
    bank_id: int | None = None


class ConfigurationsUpdate(BaseModel):
    configurations: dict[str, Any]


class ListingResponse(BaseModel):
    id: int
    user_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    site_path: str
    title: str
    description: str
    province: str
    regency: str
    street: str
    gmap_iframe: str | None = None
    price: int
    images: list[dict[str, Any]]
    purchase_status: PurchaseStatus
    sold_status: SoldStatus
    measurements: dict[str, Any]
    building_type: str
    building_condition: BuildingCondition
    building_furniture_capacity: FurnitureCapacity | None = None
    building_certificate: str
    specifications: dict[str, Any]
    facilities: list[dict[str, Any]]
    is_deleted: bool
    sold_channel: SoldChannel | None = None
    configurations: dict[str, Any]
    currency: Currency
    rent_time: RentTime | None = None
    description_seo: str | None = None
    price_down_payment: int | None = None
    developer_id: int | None = None
    bank_id: int | None = None

    model_config = {"from_attributes": True}


# Serialized as a two-element JSON array: [listing, agent]
ListingWithAgent = tuple[ListingResponse, AgentResponse]


class FindListingsResponse(BaseModel):
    data: list[ListingWithAgent]
    total_data: int
    total_pages: int


class AgentWithListings(BaseModel):
    agent: AgentResponse
    properties: list[ListingWithAgent]
