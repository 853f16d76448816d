from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    EXPIRED = "expired"


class Session(BaseModel):
    """Authenticated LinkedIn session of one owner.

    ``cookies`` is an opaque credential blob: kept out of repr and never logged.
    """

    owner_id: str
    cookies: list[dict[str, Any]] = Field(default_factory=list, repr=False)
    captured_at: datetime
    expires_at: datetime
    last_used_at: datetime | None = None

    model_config = ConfigDict(extra="ignore")

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
