from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Protocol, Set

from models.archived_profile import ArchivedProfile
from models.history import HistoryEntry, HistoryStats
from models.session import Session


class SessionsRepoPort(Protocol):
    def get(self, owner_id: str) -> Optional[Session]:
        ...

    def save(self, session: Session) -> None:
        ...

    def touch(self, owner_id: str, used_at: datetime) -> None:
        ...

    def delete(self, owner_id: str) -> bool:
        ...


class ArchiveRepoPort(Protocol):
    def get_by_key(self, owner_id: str, normalized_url: str) -> Optional[ArchivedProfile]:
        ...

    def insert(self, record: ArchivedProfile) -> ArchivedProfile:
        ...

    def update_if_version(self, record: ArchivedProfile, expected_version: int) -> bool:
        ...

    def list_for_owner(self, owner_id: str) -> List[ArchivedProfile]:
        ...


class HistoryRepoPort(Protocol):
    def append(self, entry: HistoryEntry) -> int:
        ...

    def append_many(self, entries: List[HistoryEntry]) -> int:
        ...

    def list_for_owner(
        self,
        owner_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[HistoryEntry]:
        ...

    def viewed_profile_ids(self, owner_id: str) -> Set[str]:
        ...

    def stats(self, owner_id: str) -> HistoryStats:
        ...

    def delete_older_than(self, owner_id: str, cutoff: datetime) -> int:
        ...
