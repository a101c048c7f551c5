"""Pytest configuration and fixtures for tests."""

from __future__ import annotations

import uuid
from collections.abc import Callable

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from estate_api.database import Base, register_sqlite_functions
from estate_api.models.agent import Agent
from estate_api.models.enums import (
    AgentRole,
    BuildingCondition,
    Currency,
    PurchaseStatus,
    SoldStatus,
)
from estate_api.models.listing import Listing
from estate_api.utils.slugs import build_site_path


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database per test.

    StaticPool keeps the single connection shared, so requests served by
    TestClient in another thread see the same data.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_sqlite_functions(engine)
    # Import all models so they're registered
    import estate_api.models  # noqa: F401

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine) -> Session:
    """Provide a database session for each test."""
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def make_agent(db: Session) -> Callable[..., Agent]:
    def _make_agent(**overrides) -> Agent:
        defaults = dict(
            id=uuid.uuid4(),
            fullname="Jane Doe",
            email="jane@example.com",
            phone_number="+620000000",
            role=AgentRole.AGENT.value,
        )
        defaults.update(overrides)
        agent = Agent(**defaults)
        db.add(agent)
        db.commit()
        db.refresh(agent)
        return agent

    return _make_agent


@pytest.fixture
def make_listing(db: Session) -> Callable[..., Listing]:
    def _make_listing(agent: Agent, **overrides) -> Listing:
        defaults = dict(
            title="Villa with pool",
            description="Three bedroom villa",
            province="bali",
            regency="badung",
            street="canggu",
            price=1_000_000,
            currency=Currency.IDR.value,
            purchase_status=PurchaseStatus.FOR_SALE.value,
            sold_status=SoldStatus.AVAILABLE.value,
            building_type="villa",
            building_condition=BuildingCondition.GOOD.value,
            is_deleted=False,
            configurations={},
        )
        defaults.update(overrides)
        if "site_path" not in defaults:
            defaults["site_path"] = build_site_path(
                PurchaseStatus(defaults["purchase_status"]),
                defaults["building_type"],
                defaults["province"],
                defaults["regency"],
                defaults["street"],
            )
        listing = Listing(user_id=agent.id, **defaults)
        db.add(listing)
        db.commit()
        db.refresh(listing)
        return listing

    return _make_listing
