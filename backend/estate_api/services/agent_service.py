from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func

from estate_api.database import store_errors
from estate_api.models.agent import Agent
from estate_api.utils.exceptions import AgentNotFoundError

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.orm import Session


def get_by_id(db: Session, user_id: uuid.UUID) -> Agent:
    with store_errors():
        agent = db.query(Agent).filter(Agent.id == user_id).first()
    if not agent:
        raise AgentNotFoundError(f"Agent {user_id} not found")
    return agent


def get_by_name(db: Session, fullname: str) -> Agent:
    """Case-insensitive lookup by display name."""
    with store_errors():
        agent = (
            db.query(Agent)
            .filter(func.lower(Agent.fullname) == fullname.strip().lower())
            .order_by(Agent.created_at.asc())
            .first()
        )
    if not agent:
        raise AgentNotFoundError(f"Agent '{fullname}' not found")
    return agent


def list_agents(db: Session) -> list[Agent]:
    with store_errors():
        return db.query(Agent).order_by(Agent.fullname.asc()).all()
