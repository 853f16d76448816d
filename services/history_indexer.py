from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Set

from models.history import GroupedHistory, HistoryEntry, HistoryStats
from models.profile import CandidateRecord
from models.search_criteria import SearchCriteria
from ports.repos import HistoryRepoPort
from services.profile_normalizer import profile_id_from_url
from utils.timefmt import utc_now


logger = logging.getLogger(__name__)


def _normalize_value(value: str) -> str:
    # Lowercase, trim, and collapse internal whitespace to a single space
    return " ".join(str(value).lower().split())


def compute_search_key(criteria: Optional[SearchCriteria]) -> str:
    """Deterministic key over the non-empty criteria fields, independent of field order."""
    if criteria is None:
        return ""
    pairs = sorted(
        (name, _normalize_value(value)) for name, value in criteria.present_fields().items()
    )
    return "|".join(f"{name}:{value}" for name, value in pairs if value)


class HistoryIndexer:
    def __init__(self, repo: HistoryRepoPort, clock: Callable[[], datetime] = utc_now) -> None:
        self.repo = repo
        self.clock = clock

    def _entry(self, owner_id: str, summary: CandidateRecord, criteria: SearchCriteria, now: datetime) -> HistoryEntry:
        profile_id = summary.external_id or profile_id_from_url(summary.url) or summary.url
        return HistoryEntry(
            owner_id=owner_id,
            profile_id=profile_id,
            profile_url=summary.url,
            name=summary.name,
            headline=summary.headline,
            location=summary.location,
            avatar=summary.avatar_url,
            search_criteria=criteria,
            search_key=compute_search_key(criteria),
            viewed_at=now,
        )

    def record(
        self,
        owner_id: str,
        summary: CandidateRecord,
        criteria: Optional[SearchCriteria] = None,
    ) -> HistoryEntry:
        entry = self._entry(owner_id, summary, criteria or SearchCriteria(), self.clock())
        new_id = self.repo.append(entry)
        return entry.model_copy(update={"id": new_id})

    def record_batch(
        self,
        owner_id: str,
        summaries: Iterable[CandidateRecord],
        criteria: Optional[SearchCriteria] = None,
    ) -> int:
        now = self.clock()
        entries = [self._entry(owner_id, s, criteria or SearchCriteria(), now) for s in summaries]
        count = self.repo.append_many(entries)
        logger.info("history recorded", extra={"step": "history.record", "owner": owner_id, "status": f"entries={count}"})
        return count

    def get_grouped(
        self,
        owner_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[GroupedHistory]:
        """Entries in [start, end] grouped by search key, newest group first."""
        groups: Dict[str, GroupedHistory] = {}
        members: Dict[str, Dict[str, HistoryEntry]] = {}
        # Entries arrive newest first, so the first one seen per profile is its latest view
        for entry in self.repo.list_for_owner(owner_id, start, end):
            group = groups.get(entry.search_key)
            if group is None:
                group = groups[entry.search_key] = GroupedHistory(
                    search_key=entry.search_key,
                    search_criteria=entry.search_criteria,
                    viewed_at=entry.viewed_at,
                )
                members[entry.search_key] = {}
            seen = members[entry.search_key]
            if entry.profile_id not in seen:
                seen[entry.profile_id] = entry
            if entry.viewed_at > group.viewed_at:
                group.viewed_at = entry.viewed_at

        result: List[GroupedHistory] = []
        for key, group in groups.items():
            group.profiles = list(members[key].values())
            group.count = len(group.profiles)
            result.append(group)
        result.sort(key=lambda g: g.viewed_at, reverse=True)
        return result

    def get_stats(self, owner_id: str) -> HistoryStats:
        return self.repo.stats(owner_id)

    def delete_older_than(self, owner_id: str, days: int) -> int:
        if days < 0:
            raise ValueError("days must be >= 0")
        cutoff = self.clock() - timedelta(days=days)
        deleted = self.repo.delete_older_than(owner_id, cutoff)
        logger.info("history purged", extra={"step": "history.cleanup", "owner": owner_id, "status": f"deleted={deleted}"})
        return deleted

    def viewed_profile_ids(self, owner_id: str) -> Set[str]:
        return self.repo.viewed_profile_ids(owner_id)
