from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from db.repos.history_repo import HistoryRepo
from models.profile import CandidateRecord
from models.search_criteria import SearchCriteria
from services.history_indexer import HistoryIndexer
from fakes import StepClock


def _candidate(slug: str, name: str) -> CandidateRecord:
    return CandidateRecord(external_id=slug, name=name, url=f"https://www.linkedin.com/in/{slug}")


def test_grouping_dedupes_profiles_within_a_search(conn):
    indexer = HistoryIndexer(HistoryRepo(conn), clock=StepClock())
    engineers = SearchCriteria(job_title="Engineer")
    designers = SearchCriteria(job_title="Designer")

    indexer.record("owner-a", _candidate("jane-doe", "Jane"), engineers)
    indexer.record("owner-a", _candidate("mark-lee", "Mark"), engineers)
    indexer.record("owner-a", _candidate("jane-doe", "Jane D."), SearchCriteria(job_title=" engineer "))
    indexer.record("owner-a", _candidate("ana-ruiz", "Ana"), designers)

    groups = indexer.get_grouped("owner-a")
    assert [g.search_key for g in groups] == ["job_title:designer", "job_title:engineer"]
    eng = groups[1]
    assert eng.count == 2
    assert {p.profile_id for p in eng.profiles} == {"jane-doe", "mark-lee"}
    # latest view of a profile wins inside its group
    jane = next(p for p in eng.profiles if p.profile_id == "jane-doe")
    assert jane.name == "Jane D."
    assert groups[0].viewed_at > eng.viewed_at


def test_range_filter_is_inclusive(conn):
    clock = StepClock(start=datetime(2026, 3, 1, tzinfo=timezone.utc), step=timedelta(days=1))
    indexer = HistoryIndexer(HistoryRepo(conn), clock=clock)
    for slug in ("a-1", "b-2", "c-3", "d-4"):
        indexer.record("owner-a", _candidate(slug, slug), SearchCriteria(company="Acme"))

    start = datetime(2026, 3, 2, tzinfo=timezone.utc)
    end = datetime(2026, 3, 3, tzinfo=timezone.utc)
    groups = indexer.get_grouped("owner-a", start=start, end=end)
    assert len(groups) == 1
    assert {p.profile_id for p in groups[0].profiles} == {"b-2", "c-3"}


def test_stats_and_viewed_ids(conn):
    indexer = HistoryIndexer(HistoryRepo(conn), clock=StepClock())
    assert indexer.get_stats("owner-a").total == 0
    assert indexer.get_stats("owner-a").last_viewed is None

    count = indexer.record_batch(
        "owner-a",
        [_candidate("jane-doe", "Jane"), _candidate("mark-lee", "Mark")],
        SearchCriteria(job_title="Engineer"),
    )
    indexer.record("owner-a", _candidate("jane-doe", "Jane"), SearchCriteria(company="Acme"))
    indexer.record("owner-b", _candidate("zed-x", "Zed"), None)

    assert count == 2
    stats = indexer.get_stats("owner-a")
    assert stats.total == 3
    assert stats.unique_searches == 2
    assert stats.last_viewed is not None
    assert indexer.viewed_profile_ids("owner-a") == {"jane-doe", "mark-lee"}


def test_delete_older_than_only_touches_old_rows_of_owner(conn):
    clock = StepClock(start=datetime(2026, 1, 1, tzinfo=timezone.utc), step=timedelta(days=10))
    indexer = HistoryIndexer(HistoryRepo(conn), clock=clock)
    indexer.record("owner-a", _candidate("old-1", "Old"))  # Jan 1
    indexer.record("owner-b", _candidate("old-2", "Old"))  # Jan 11
    indexer.record("owner-a", _candidate("new-1", "New"))  # Jan 21
    # cleanup runs at Jan 31, keeping 15 days -> cutoff Jan 16
    deleted = indexer.delete_older_than("owner-a", 15)

    assert deleted == 1
    assert indexer.viewed_profile_ids("owner-a") == {"new-1"}
    assert indexer.viewed_profile_ids("owner-b") == {"old-2"}


def test_negative_retention_is_rejected(conn):
    indexer = HistoryIndexer(HistoryRepo(conn))
    with pytest.raises(ValueError):
        indexer.delete_older_than("owner-a", -1)
