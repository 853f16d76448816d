from __future__ import annotations

from pydantic import BaseModel, Field

from models.profile import CandidateRecord


class Pagination(BaseModel):
    page: int = 1
    limit: int = 0
    total: int = 0
    has_more: bool = False


class SearchResponse(BaseModel):
    results: list[CandidateRecord] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    message: str | None = None
