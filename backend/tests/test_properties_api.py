"""HTTP tests for the /properties endpoints."""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from estate_api.database import get_db
from estate_api.main import app
from estate_api.models.enums import AgentRole, PurchaseStatus


@pytest.fixture
def client(db: Session):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def alice(make_agent):
    return make_agent(fullname="Alice Agent")


@pytest.fixture
def admin(make_agent):
    return make_agent(fullname="Ada Admin", role=AgentRole.ADMIN.value)


def _as(agent) -> dict[str, str]:
    return {"x-user-id": str(agent.id)}


NEW_LISTING = {
    "title": "Hillside villa",
    "description": "Rice field view",
    "province": "Bali",
    "regency": "Gianyar",
    "street": "Ubud",
    "price": 2_000_000,
    "purchase_status": "ForSale",
    "building_type": "Villa",
    "building_condition": "Good",
    "currency": "IDR",
}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_find_listings_envelope(client, alice, make_listing):
    make_listing(alice)
    make_listing(alice, purchase_status=PurchaseStatus.FOR_RENT.value)

    response = client.get("/properties", params={"limit": 1, "page": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["total_data"] == 2
    assert body["total_pages"] == 3
    assert len(body["data"]) == 1
    listing, agent = body["data"][0]
    assert listing["user_id"] == str(alice.id)
    assert agent["fullname"] == "Alice Agent"


def test_find_listings_with_filters(client, alice, make_listing):
    rent = make_listing(alice, purchase_status=PurchaseStatus.FOR_RENT.value)
    make_listing(alice)

    response = client.get(
        "/properties", params={"province": "Bali", "purchase_status": "ForRent"}
    )

    assert response.status_code == 200
    assert [row[0]["id"] for row in response.json()["data"]] == [rent.id]


def test_unknown_caller_is_forbidden(client):
    response = client.get("/properties", headers={"x-user-id": str(uuid.uuid4())})
    assert response.status_code == 403


def test_malformed_caller_is_unauthorized(client):
    response = client.get("/properties", headers={"x-user-id": "agent-42"})
    assert response.status_code == 401


def test_list_agents(client, alice, admin):
    response = client.get("/properties/agents")
    assert response.status_code == 200
    assert {a["fullname"] for a in response.json()} == {"Alice Agent", "Ada Admin"}


@pytest.mark.parametrize("params", [{"page": 0, "limit": 5}, {"limit": -1}])
def test_non_positive_paging_is_rejected(client, params):
    assert client.get("/properties", params=params).status_code == 422


@pytest.mark.parametrize(
    "params",
    [
        {"page": 10**19, "limit": 5},
        {"page": 2**62, "limit": 4},
        {"limit": 2**31},
        {"developer_id": 10**20},
    ],
)
def test_oversized_integers_are_rejected(client, params):
    assert client.get("/properties", params=params).status_code == 422


@pytest.mark.parametrize(
    "path",
    [
        f"/properties/{2**31}",
        f"/properties/related/{10**20}",
        "/properties/related/1?page=4611686018427387904&limit=4",
    ],
)
def test_oversized_ids_and_paging_are_rejected(client, path):
    assert client.get(path).status_code == 422


def test_invalid_sort_is_rejected(client):
    assert client.get("/properties", params={"sort": "Cheapest"}).status_code == 422


def test_find_one_missing_is_server_error(client):
    assert client.get("/properties/9999").status_code == 500


def test_related_missing_is_server_error(client):
    assert client.get("/properties/related/9999").status_code == 500


def test_find_by_agent_name(client, alice, make_listing):
    listing = make_listing(alice)
    response = client.get("/properties/agents/alice-agent")
    assert response.status_code == 200
    body = response.json()
    assert body["agent"]["id"] == str(alice.id)
    assert [row[0]["id"] for row in body["properties"]] == [listing.id]


def test_find_by_unknown_agent_name(client):
    assert client.get("/properties/agents/nobody").status_code == 404


def test_site_paths(client, alice, make_listing):
    make_listing(alice)
    response = client.get("/properties/site-paths")
    assert response.status_code == 200
    assert "/for-sale/villa/bali/badung/canggu" in response.json()


def test_create_requires_identity(client):
    assert client.post("/properties", json=NEW_LISTING).status_code == 401


def test_create_update_delete_lifecycle(client, alice, admin):
    created = client.post("/properties", json=NEW_LISTING, headers=_as(alice))
    assert created.status_code == 201
    listing = created.json()
    assert listing["site_path"] == "/for-sale/villa/bali/gianyar/ubud"
    assert listing["sold_status"] == "Available"

    updated = client.put(
        f"/properties/{listing['id']}",
        json={**NEW_LISTING, "street": "Tegallalang"},
        headers=_as(alice),
    )
    assert updated.status_code == 200
    assert updated.json()["site_path"] == "/for-sale/villa/bali/gianyar/tegallalang"

    deleted = client.delete(f"/properties/{listing['id']}", headers=_as(alice))
    assert deleted.status_code == 200
    assert deleted.json()["removed"] is False

    # Still there for admins, gone for everyone else
    assert client.get(f"/properties/{listing['id']}", headers=_as(admin)).status_code == 200
    assert client.get(f"/properties/{listing['id']}").status_code == 500


def test_update_by_other_agent_is_forbidden(client, alice, make_agent, make_listing):
    listing = make_listing(alice)
    bob = make_agent(fullname="Bob Broker")
    response = client.put(f"/properties/{listing.id}", json=NEW_LISTING, headers=_as(bob))
    assert response.status_code == 403


def test_configurations_require_admin(client, alice, admin, make_listing):
    listing = make_listing(alice)
    body = {"configurations": {"is_popular": True}}

    denied = client.put(f"/properties/configurations/{listing.id}", json=body, headers=_as(alice))
    assert denied.status_code == 403

    allowed = client.put(f"/properties/configurations/{listing.id}", json=body, headers=_as(admin))
    assert allowed.status_code == 200
    assert allowed.json()["configurations"] == {"is_popular": True}

    popular = client.get("/properties", params={"is_popular": "true"})
    assert [row[0]["id"] for row in popular.json()["data"]] == [listing.id]
