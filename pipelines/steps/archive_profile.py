from __future__ import annotations

import logging
import sqlite3

from errors import ArchiveConflict
from pipelines.runner import RunContext
from services.archive_merger import ArchiveMerger


logger = logging.getLogger(__name__)


class ArchiveProfile:
    """Upsert the scraped profile; a persistence failure is recorded, not raised."""

    def __init__(self, merger: ArchiveMerger) -> None:
        self.merger = merger

    def run(self, ctx: RunContext) -> RunContext:
        if ctx.profile is None or not ctx.url:
            return ctx
        try:
            ctx.archived = self.merger.upsert(ctx.owner_id, ctx.url, ctx.profile)
            ctx.meta["archived"] = True
        except (sqlite3.Error, ArchiveConflict) as e:
            logger.error(
                "archive upsert failed",
                extra={"step": "archive_profile", "owner": ctx.owner_id, "status": "failed", "error": repr(e)},
            )
            ctx.meta["archived"] = False
            ctx.meta["archive_error"] = repr(e)
        return ctx
