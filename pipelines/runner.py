from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from models.archived_profile import ArchivedProfile
from models.profile import CandidateRecord, Profile
from models.search_criteria import SearchCriteria
from utils.logging_setup import init_logging


@dataclass
class RunContext:
    owner_id: str
    url: Optional[str] = None
    criteria: Optional[SearchCriteria] = None
    profile: Optional[Profile] = None
    candidates: List[CandidateRecord] = field(default_factory=list)
    archived: Optional[ArchivedProfile] = None
    meta: dict = field(default_factory=dict)


class Step(Protocol):
    def run(self, ctx: RunContext) -> RunContext:
        ...


class Pipeline:
    def __init__(self, steps: List[Step]):
        self.steps = steps

    def run(self, ctx: RunContext) -> RunContext:
        # Make logging idempotent for any direct runner use
        init_logging()
        for step in self.steps:
            ctx = step.run(ctx)
        return ctx
