from __future__ import annotations

import logging
import sqlite3

from pipelines.runner import RunContext
from services.history_indexer import HistoryIndexer


logger = logging.getLogger(__name__)


class RecordHistory:
    """Append one view event for the scraped profile."""

    def __init__(self, indexer: HistoryIndexer) -> None:
        self.indexer = indexer

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.profile is None or not ctx.profile.url:
            return ctx
        try:
            self.indexer.record(ctx.owner_id, ctx.profile, ctx.criteria)
            ctx.meta["history_recorded"] = 1
        except sqlite3.Error as e:
            logger.error(
                "history record failed",
                extra={"step": "record_history", "owner": ctx.owner_id, "status": "failed", "error": repr(e)},
            )
            ctx.meta["history_recorded"] = 0
            ctx.meta["history_error"] = repr(e)
        return ctx


class RecordSearchResults:
    """Append view events for the new candidates of a search."""

    def __init__(self, indexer: HistoryIndexer) -> None:
        self.indexer = indexer

    def run(self, ctx: RunContext) -> RunContext:
        if not ctx.candidates:
            ctx.meta["history_recorded"] = 0
            return ctx
        try:
            ctx.meta["history_recorded"] = self.indexer.record_batch(ctx.owner_id, ctx.candidates, ctx.criteria)
        except sqlite3.Error as e:
            logger.error(
                "history batch failed",
                extra={"step": "record_search_results", "owner": ctx.owner_id, "status": "failed", "error": repr(e)},
            )
            ctx.meta["history_recorded"] = 0
            ctx.meta["history_error"] = repr(e)
        return ctx
