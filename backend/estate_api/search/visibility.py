"""Role-dependent base filter applied before any caller-supplied filter."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from estate_api.models.enums import AgentRole, SoldStatus
from estate_api.search.predicates import MATCH_ALL, Equals, Predicate, and_


@dataclass(frozen=True)
class CallerIdentity:
    user_id: uuid.UUID
    role: AgentRole

    @property
    def is_admin(self) -> bool:
        return self.role == AgentRole.ADMIN

    def owns(self, owner_id: uuid.UUID) -> bool:
        return self.user_id == owner_id


PUBLIC_VISIBILITY: Predicate = and_(
    Equals("is_deleted", False),
    Equals("sold_status", SoldStatus.AVAILABLE.value),
)


def resolve_visibility(identity: CallerIdentity | None) -> Predicate:
    if identity is None:
        return PUBLIC_VISIBILITY
    if identity.role == AgentRole.ADMIN:
        return MATCH_ALL
    return and_(
        Equals("user_id", identity.user_id),
        Equals("is_deleted", False),
    )
