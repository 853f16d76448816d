"""
Non-regressing upsert of scraped profiles into the per-owner archive.

Every field follows "new value wins if non-empty, else keep old". Email is the
exception: a REAL address from either side always survives a later scrape that
found only a placeholder or nothing at all.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from errors import ArchiveConflict
from models.archived_profile import MERGEABLE_FIELDS, ArchivedProfile
from models.email_value import EmailValue
from models.profile import Profile
from ports.repos import ArchiveRepoPort
from services.profile_normalizer import normalize_url
from utils.timefmt import utc_now


logger = logging.getLogger(__name__)


def merge_email(old: EmailValue, new: EmailValue) -> EmailValue:
    if new.is_real:
        return new
    if old.is_real:
        return old
    return new


def _is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def merge(existing: ArchivedProfile, incoming: ArchivedProfile) -> ArchivedProfile:
    """Field-wise merge of ``incoming`` onto ``existing``; identity and timestamps are kept."""
    updates = {}
    for field in MERGEABLE_FIELDS:
        new_value = getattr(incoming, field)
        updates[field] = getattr(existing, field) if _is_empty(new_value) else new_value
    updates["email"] = merge_email(existing.email, incoming.email)
    return existing.model_copy(update=updates)


def to_archive_record(owner_id: str, url: str, profile: Profile, now: datetime) -> ArchivedProfile:
    return ArchivedProfile(
        owner_id=owner_id,
        url=url,
        normalized_url=normalize_url(url),
        name=profile.name,
        headline=profile.headline,
        location=profile.location,
        company=profile.company,
        company_domain=profile.company_domain,
        email=profile.email,
        avatar=profile.avatar_url,
        about=profile.about,
        skills=list(profile.skills),
        scraped_at=now,
        updated_at=now,
    )


class ArchiveMerger:
    def __init__(self, repo: ArchiveRepoPort, clock: Callable[[], datetime] = utc_now) -> None:
        self.repo = repo
        self.clock = clock
        # key -> [lock, number of callers holding or waiting on it]
        self._locks: Dict[Tuple[str, str], list] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _key_lock(self, key: Tuple[str, str]) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def upsert(self, owner_id: str, url: str, profile: Profile) -> ArchivedProfile:
        """Insert or merge; a lost write race is retried once and then surfaced."""
        key = (owner_id, normalize_url(url))
        with self._key_lock(key):
            try:
                return self._upsert_once(owner_id, url, profile)
            except ArchiveConflict:
                logger.info(
                    "archive conflict, retrying",
                    extra={"step": "archive.upsert", "owner": owner_id, "status": "retry"},
                )
                return self._upsert_once(owner_id, url, profile)

    def _upsert_once(self, owner_id: str, url: str, profile: Profile) -> ArchivedProfile:
        now = self.clock()
        incoming = to_archive_record(owner_id, url, profile, now)
        existing = self.repo.get_by_key(owner_id, incoming.normalized_url)
        if existing is None:
            record = self.repo.insert(incoming)
            logger.info("profile archived", extra={"step": "archive.upsert", "owner": owner_id, "status": "inserted"})
            return record

        merged = merge(existing, incoming)
        if merged.content_equals(existing):
            logger.debug("archive unchanged", extra={"step": "archive.upsert", "owner": owner_id, "status": "unchanged"})
            return existing

        merged = merged.model_copy(update={"updated_at": now})
        if not self.repo.update_if_version(merged, existing.version):
            raise ArchiveConflict(owner_id, existing.normalized_url)
        logger.info("profile merged", extra={"step": "archive.upsert", "owner": owner_id, "status": "merged"})
        return merged.model_copy(update={"version": existing.version + 1})

    def list_archives(self, owner_id: str) -> List[ArchivedProfile]:
        return self.repo.list_for_owner(owner_id)

    def get(self, owner_id: str, url: str) -> Optional[ArchivedProfile]:
        return self.repo.get_by_key(owner_id, normalize_url(url))
