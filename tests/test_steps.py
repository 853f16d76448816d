from __future__ import annotations

import sqlite3

from db.repos.archive_repo import ArchiveRepo
from db.repos.history_repo import HistoryRepo
from errors import ArchiveConflict
from models.profile import Profile
from models.search_criteria import SearchCriteria
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import ArchiveProfile, RecordHistory, ResolveCompanyDomain
from services.archive_merger import ArchiveMerger
from services.company_lookup import GoogleCompanyLookup
from services.domain_utils import extract_apex_domain, is_company_host
from services.history_indexer import HistoryIndexer
from fakes import StepClock, make_settings


URL = "https://www.linkedin.com/in/jane-doe/"


class _StubLookup:
    def __init__(self, domain=None, error=None):
        self.domain = domain
        self.error = error
        self.calls = []

    def resolve_domain(self, company):
        self.calls.append(company)
        if self.error:
            raise self.error
        return self.domain


class _ConflictingMerger:
    def upsert(self, owner_id, url, profile):
        raise ArchiveConflict(owner_id, url)


def _ctx(**profile_fields) -> RunContext:
    profile = Profile(external_id="jane-doe", name="Jane Doe", url=URL, **profile_fields)
    return RunContext(owner_id="owner-a", url=URL, criteria=SearchCriteria(job_title="Sales"), profile=profile)


def test_resolve_company_sets_domain():
    lookup = _StubLookup(domain="acme.com")
    out = ResolveCompanyDomain(lookup).run(_ctx(company="Acme"))
    assert out.profile.company_domain == "acme.com"
    assert lookup.calls == ["Acme"]


def test_resolve_company_is_skipped_or_absorbed():
    lookup = _StubLookup(domain="acme.com")
    assert ResolveCompanyDomain(lookup).run(_ctx()).profile.company_domain is None
    assert ResolveCompanyDomain(None).run(_ctx(company="Acme")).profile.company_domain is None
    assert lookup.calls == []

    out = ResolveCompanyDomain(_StubLookup(error=RuntimeError("quota"))).run(_ctx(company="Acme"))
    assert out.profile.company_domain is None
    assert "quota" in out.meta["company_lookup_error"]


def test_archive_and_history_steps_persist(conn):
    clock = StepClock()
    pipeline = Pipeline([
        ResolveCompanyDomain(_StubLookup(domain="acme.com")),
        ArchiveProfile(ArchiveMerger(ArchiveRepo(conn), clock=clock)),
        RecordHistory(HistoryIndexer(HistoryRepo(conn), clock=clock)),
    ])
    out = pipeline.run(_ctx(company="Acme"))

    assert out.meta["archived"] is True
    assert out.archived.company_domain == "acme.com"
    assert out.meta["history_recorded"] == 1
    cur = conn.cursor()
    cur.execute("SELECT profile_id, search_key FROM profile_history")
    assert cur.fetchall() == [("jane-doe", "job_title:sales")]


def test_archive_conflict_is_recorded_not_raised(conn):
    out = Pipeline([
        ArchiveProfile(_ConflictingMerger()),
        RecordHistory(HistoryIndexer(HistoryRepo(conn))),
    ]).run(_ctx())

    assert out.meta["archived"] is False
    assert "ArchiveConflict" in out.meta["archive_error"]
    assert out.meta["history_recorded"] == 1


def test_history_failure_is_absorbed(tmp_path):
    db = sqlite3.connect(str(tmp_path / "empty.db"))
    try:
        out = RecordHistory(HistoryIndexer(HistoryRepo(db))).run(_ctx())
    finally:
        db.close()
    assert out.meta["history_recorded"] == 0
    assert "profile_history" in out.meta["history_error"]


class _Response:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


class _Session:
    def __init__(self, response):
        self.response = response
        self.calls = 0

    def get(self, url, params=None, timeout=None):
        self.calls += 1
        return self.response


def test_google_lookup_skips_social_hosts_and_caches():
    payload = {"items": [
        {"link": "https://de.linkedin.com/company/acme", "displayLink": "de.linkedin.com"},
        {"link": "https://www.acme.co.uk/about", "displayLink": "www.acme.co.uk"},
    ]}
    session = _Session(_Response(200, payload))
    lookup = GoogleCompanyLookup(make_settings(google_api_key="k", google_cse_id="cx"), session=session)

    assert lookup.resolve_domain("Acme ") == "acme.co.uk"
    assert lookup.resolve_domain("acme") == "acme.co.uk"
    assert session.calls == 1


def test_google_lookup_error_status_gives_none():
    lookup = GoogleCompanyLookup(make_settings(google_api_key="k", google_cse_id="cx"), session=_Session(_Response(429, {})))
    assert lookup.resolve_domain("Acme") is None


def test_domain_helpers():
    assert extract_apex_domain("https://shop.example.co.uk/path") == "example.co.uk"
    assert extract_apex_domain("acme.com") == "acme.com"
    assert extract_apex_domain(None) is None
    assert is_company_host("www.acme.com")
    assert not is_company_host("en.wikipedia.org")
