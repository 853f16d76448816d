"""
Exposed operations of the acquisition and archival engine.

Browser-bound operations are async and run inside an owner-scoped page from
BrowseGate; archive and history operations are plain synchronous calls.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import List, Optional, Set

from config.settings import Settings, get_settings
from errors import TransientBrowseFailure
from extraction.engine import ExtractionEngine
from models.archived_profile import ArchivedProfile
from models.history import GroupedHistory, HistoryStats
from models.profile import CandidateRecord, Profile
from models.search_criteria import SearchCriteria
from models.search_response import Pagination, SearchResponse
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import ArchiveProfile, RecordHistory, RecordSearchResults, ResolveCompanyDomain
from ports.lookup import CompanyLookupPort
from services import query_builder
from services.archive_merger import ArchiveMerger
from services.browse import BrowseGate, BrowsePage
from services.history_indexer import HistoryIndexer
from services.profile_normalizer import normalize, profile_url_for
from utils.browse_logger import log_browse


logger = logging.getLogger(__name__)


def _search_message(found: int, fetched: int) -> Optional[str]:
    duplicates = fetched - found
    if found == 0 and fetched > 0:
        return f"All {fetched} profiles have been viewed previously. Try different search criteria."
    if found == 0:
        return "No profiles found. Try broader search terms or different location."
    if duplicates > 0:
        return f"Found {found} new profile(s). {duplicates} duplicate(s) filtered."
    return None


class LinkedInArchiveService:
    def __init__(
        self,
        gate: BrowseGate,
        merger: ArchiveMerger,
        history: HistoryIndexer,
        engine: Optional[ExtractionEngine] = None,
        lookup: Optional[CompanyLookupPort] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.gate = gate
        self.merger = merger
        self.history = history
        self.engine = engine or ExtractionEngine()
        self.lookup = lookup
        self.settings = settings or get_settings()

    # --- search ---

    async def search_people(self, owner_id: str, criteria: SearchCriteria) -> SearchResponse:
        """Page through results until enough profiles the owner has not seen are found."""
        started = time.monotonic()
        target = self.settings.search_target_unique
        max_pages = self.settings.search_max_pages

        async with self.gate.page_for(owner_id) as page:
            viewed = self.history.viewed_profile_ids(owner_id)
            unique: List[CandidateRecord] = []
            fetched = 0
            page_num = 0
            last_page_empty = False
            while len(unique) < target and page_num < max_pages:
                page_num += 1
                request = query_builder.build(criteria, page=page_num)
                try:
                    rows = await self._search_page(page, request.url)
                except TransientBrowseFailure as e:
                    if page_num == 1:
                        raise
                    logger.warning(
                        "search paging stopped",
                        extra={"step": "search", "owner": owner_id, "status": f"page={page_num}", "error": str(e)},
                    )
                    break
                if not rows:
                    last_page_empty = True
                    break
                fetched += len(rows)
                new_rows = self._unseen(rows, viewed, unique)
                unique.extend(new_rows)
                logger.info(
                    "search page extracted",
                    extra={"step": "search", "owner": owner_id, "status": f"page={page_num} rows={len(rows)} new={len(new_rows)}"},
                )

        results = unique[:target]
        ctx = Pipeline([RecordSearchResults(self.history)]).run(
            RunContext(owner_id=owner_id, criteria=criteria, candidates=results)
        )
        log_browse(
            operation="search",
            owner_id=owner_id,
            duration_ms=int((time.monotonic() - started) * 1000),
            extras={"pages": page_num, "fetched": fetched, "unique": len(results), "recorded": ctx.meta.get("history_recorded")},
        )
        return SearchResponse(
            results=results,
            pagination=Pagination(
                page=1,
                limit=target,
                total=len(results),
                has_more=bool(results) and not last_page_empty and (len(unique) >= target or page_num >= max_pages),
            ),
            message=_search_message(len(results), fetched),
        )

    async def _search_page(self, page: BrowsePage, url: str) -> List[CandidateRecord]:
        content = await page.visit(url)
        rows = self.engine.extract_search_results(content)
        if rows:
            return rows
        # Results render lazily; one scroll usually brings them in
        await page.scroll()
        return self.engine.extract_search_results(await page.content())

    @staticmethod
    def _unseen(rows: List[CandidateRecord], viewed: Set[str], collected: List[CandidateRecord]) -> List[CandidateRecord]:
        taken = {c.external_id for c in collected}
        fresh: List[CandidateRecord] = []
        for row in rows:
            if row.external_id in viewed or row.external_id in taken:
                continue
            taken.add(row.external_id)
            fresh.append(row)
        return fresh

    # --- scrape ---

    async def scrape_profile(
        self,
        owner_id: str,
        url_or_id: str,
        known_name: Optional[str] = None,
        criteria: Optional[SearchCriteria] = None,
    ) -> Profile:
        """Extract a full profile, archive it and record the view.

        Archive and history failures are logged and do not fail the scrape.
        """
        started = time.monotonic()
        url = profile_url_for(url_or_id)
        async with self.gate.page_for(owner_id) as page:
            content = await page.visit(url)
            contact_content = None
            try:
                await page.scroll()
                content = await page.content()
                contact_content = await page.reveal_contact()
            except TransientBrowseFailure as e:
                logger.warning(
                    "profile enrichment skipped",
                    extra={"step": "scrape", "owner": owner_id, "status": "partial", "error": str(e)},
                )

        raw = self.engine.extract_profile(content, contact_content)
        profile = normalize(raw, url, known_name=known_name, placeholder_email=self.settings.fallback_email)

        ctx = Pipeline([
            ResolveCompanyDomain(self.lookup),
            ArchiveProfile(self.merger),
            RecordHistory(self.history),
        ]).run(RunContext(owner_id=owner_id, url=url, criteria=criteria, profile=profile))

        log_browse(
            operation="scrape",
            owner_id=owner_id,
            url=url,
            duration_ms=int((time.monotonic() - started) * 1000),
            status="ok" if ctx.meta.get("archived") else "partial",
            error=ctx.meta.get("archive_error"),
            extras={"email_kind": profile.email.kind.value, "skills": len(profile.skills)},
        )
        return ctx.profile

    # --- archive / history ---

    def get_archives(self, owner_id: str) -> List[ArchivedProfile]:
        return self.merger.list_archives(owner_id)

    def get_history_grouped(
        self,
        owner_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[GroupedHistory]:
        return self.history.get_grouped(owner_id, start, end)

    def get_history_stats(self, owner_id: str) -> HistoryStats:
        return self.history.get_stats(owner_id)

    def delete_history_older_than(self, owner_id: str, days: int) -> int:
        return self.history.delete_older_than(owner_id, days)
