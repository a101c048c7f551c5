from __future__ import annotations

import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from estate_api.models.enums import AgentRole
from estate_api.services import identity_service
from estate_api.utils.exceptions import (
    AgentNotFoundError,
    ForbiddenError,
    PoolExhaustedError,
    UnauthorizedError,
)


def test_anonymous_request_does_not_touch_the_store():
    db = MagicMock()
    assert identity_service.identity_from_request(db, {}) is None
    db.query.assert_not_called()


def test_known_agent(db, make_agent):
    agent = make_agent(role=AgentRole.ADMIN.value)
    identity = identity_service.identity_from_request(db, {"x-user-id": str(agent.id)})
    assert identity.user_id == agent.id
    assert identity.role is AgentRole.ADMIN
    assert identity.is_admin


def test_unknown_agent_is_not_found(db):
    with pytest.raises(AgentNotFoundError):
        identity_service.identity_from_request(db, {"x-user-id": str(uuid.uuid4())})


def test_unknown_agent_is_forbidden_when_resolving_caller(db):
    with pytest.raises(ForbiddenError):
        identity_service.resolve_caller(db, {"x-user-id": str(uuid.uuid4())})


def test_store_failure_during_role_lookup_is_forbidden():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    with pytest.raises(ForbiddenError):
        identity_service.resolve_caller(db, {"x-user-id": str(uuid.uuid4())})


def test_unrecognised_stored_role_is_forbidden(db, make_agent):
    agent = make_agent(role="Owner")
    with pytest.raises(ForbiddenError):
        identity_service.identity_from_request(db, {"x-user-id": str(agent.id)})


def test_malformed_header_is_unauthorized(db):
    with pytest.raises(UnauthorizedError):
        identity_service.identity_from_request(db, {"x-user-id": "not-a-uuid"})


def test_pool_exhaustion_during_role_lookup_is_not_forbidden():
    db = MagicMock()
    db.query.side_effect = PoolTimeoutError("QueuePool limit reached")
    with pytest.raises(PoolExhaustedError):
        identity_service.resolve_caller(db, {"x-user-id": str(uuid.uuid4())})
