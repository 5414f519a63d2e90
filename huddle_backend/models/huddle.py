from __future__ import annotations

from datetime import datetime
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class Huddle(BaseModel):
    """Read-only snapshot of an active huddle handed out by the registry."""

    model_config = ConfigDict(frozen=True)

    id: str
    channel_name: str
    created_by: str
    created_at: datetime
    participants: Tuple[str, ...] = Field(default_factory=tuple)

    @property
    def participant_count(self) -> int:
        return len(self.participants)
