from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from estate_api.database import Base
from estate_api.models.enums import SoldStatus

if TYPE_CHECKING:
    from estate_api.models.agent import Agent

# JSONB on PostgreSQL so containment and path lookups can use GIN indexes
JsonDocument = JSON().with_variant(JSONB(), "postgresql")


class Listing(Base):
    """A property offered for sale or rent by an agent."""

    __tablename__ = "listings"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("agents.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now()
    )
    site_path: Mapped[str] = mapped_column(String(1000), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    province: Mapped[str] = mapped_column(String(255), nullable=False)
    regency: Mapped[str] = mapped_column(String(255), nullable=False)
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    gmap_iframe: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False)
    images: Mapped[list[dict[str, Any]]] = mapped_column(JsonDocument, default=list)
    purchase_status: Mapped[str] = mapped_column(String(20), nullable=False)
    sold_status: Mapped[str] = mapped_column(
        String(20), default=SoldStatus.AVAILABLE.value
    )
    measurements: Mapped[dict[str, Any]] = mapped_column(JsonDocument, default=dict)
    building_type: Mapped[str] = mapped_column(String(255), nullable=False)
    building_condition: Mapped[str] = mapped_column(String(30), nullable=False)
    building_furniture_capacity: Mapped[Optional[str]] = mapped_column(
        String(30), nullable=True
    )
    building_certificate: Mapped[str] = mapped_column(String(255), default="")
    specifications: Mapped[dict[str, Any]] = mapped_column(JsonDocument, default=dict)
    facilities: Mapped[list[dict[str, Any]]] = mapped_column(JsonDocument, default=list)
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    sold_channel: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    configurations: Mapped[dict[str, Any]] = mapped_column(JsonDocument, default=dict)
    rent_time: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    description_seo: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    price_down_payment: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    # Developers and banks are managed by a separate service
    developer_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    bank_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    agent: Mapped[Agent] = relationship(back_populates="listings")
