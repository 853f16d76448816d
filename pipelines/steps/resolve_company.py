from __future__ import annotations

import logging
from typing import Optional

from pipelines.runner import RunContext
from ports.lookup import CompanyLookupPort


logger = logging.getLogger(__name__)


class ResolveCompanyDomain:
    """Attach the company's apex domain to the profile when a lookup is configured."""

    def __init__(self, lookup: Optional[CompanyLookupPort]) -> None:
        self.lookup = lookup

    def run(self, ctx: RunContext) -> RunContext:
        profile = ctx.profile
        if self.lookup is None or profile is None or not profile.company or profile.company_domain:
            return ctx
        try:
            domain = self.lookup.resolve_domain(profile.company)
        except Exception as e:
            logger.warning(
                "company lookup failed",
                extra={"step": "resolve_company", "owner": ctx.owner_id, "error": repr(e)},
            )
            ctx.meta["company_lookup_error"] = repr(e)
            return ctx
        if domain:
            ctx.profile = profile.model_copy(update={"company_domain": domain})
        return ctx
