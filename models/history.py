from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.search_criteria import SearchCriteria


class HistoryEntry(BaseModel):
    """One profile-view event. Never updated after insert."""

    id: int | None = None
    owner_id: str
    profile_id: str
    profile_url: str
    name: str | None = None
    headline: str | None = None
    location: str | None = None
    avatar: str | None = None
    search_criteria: SearchCriteria = Field(default_factory=SearchCriteria)
    search_key: str = ""
    viewed_at: datetime

    model_config = ConfigDict(frozen=True)


class GroupedHistory(BaseModel):
    search_key: str
    search_criteria: SearchCriteria
    profiles: list[HistoryEntry] = Field(default_factory=list)
    viewed_at: datetime
    count: int = 0


class HistoryStats(BaseModel):
    total: int = 0
    unique_searches: int = 0
    last_viewed: datetime | None = None
