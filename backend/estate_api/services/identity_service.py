"""Resolve the calling agent from request headers.

The session layer in front of this service authenticates the caller and
forwards the agent id in ``settings.user_id_header``. Anonymous requests
carry no header and never touch the database.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING

from estate_api.config import settings
from estate_api.models.enums import AgentRole
from estate_api.search.visibility import CallerIdentity
from estate_api.services import agent_service
from estate_api.utils.exceptions import (
    ForbiddenError,
    NotFoundError,
    StoreError,
    UnauthorizedError,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def parse_user_id(headers: Mapping[str, str]) -> uuid.UUID | None:
    raw = headers.get(settings.user_id_header)
    if raw is None:
        return None
    try:
        return uuid.UUID(raw.strip())
    except ValueError as e:
        raise UnauthorizedError(f"Malformed {settings.user_id_header} header") from e


def identity_from_request(db: Session, headers: Mapping[str, str]) -> CallerIdentity | None:
    """``None`` for anonymous callers, otherwise the agent's id and role.

    Raises ``AgentNotFoundError`` or ``StoreError`` from the role lookup and
    ``ForbiddenError`` if the stored role is not a known one.
    """
    user_id = parse_user_id(headers)
    if user_id is None:
        return None

    agent = agent_service.get_by_id(db, user_id)
    try:
        role = AgentRole(agent.role)
    except ValueError as e:
        raise ForbiddenError(f"Unknown role '{agent.role}'") from e
    return CallerIdentity(user_id=agent.id, role=role)


def resolve_caller(db: Session, headers: Mapping[str, str]) -> CallerIdentity | None:
    """Like ``identity_from_request`` but a failed role lookup denies access.

    An exhausted connection pool is not a failed lookup: ``PoolExhaustedError``
    propagates and is served as 503 rather than 403.
    """
    try:
        return identity_from_request(db, headers)
    except (NotFoundError, StoreError) as e:
        logger.warning("Role resolution failed, denying request: %s", e)
        raise ForbiddenError("Forbidden") from e

