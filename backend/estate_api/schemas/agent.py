from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel

from estate_api.models.enums import AgentRole


class AgentResponse(BaseModel):
    id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    fullname: str
    email: str
    phone_number: str
    profile_picture_url: str | None = None
    role: AgentRole
    instagram: str | None = None
    description: str | None = None

    model_config = {"from_attributes": True}
