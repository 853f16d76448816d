from __future__ import annotations

import logging
from typing import Dict, List, Optional

from extraction.chain import FallbackChain
from extraction.dom import parse
from extraction.normalize import company_from_headline
from extraction import profile_strategies as ps
from extraction.search_strategies import SEARCH_ROW_STRATEGIES
from models.email_value import EmailValue
from models.profile import CandidateRecord, Profile


logger = logging.getLogger(__name__)


class ExtractionEngine:
    """Turns rendered LinkedIn markup into records through per-concern fallback chains."""

    def __init__(self) -> None:
        self.search_rows: FallbackChain[List[CandidateRecord]] = FallbackChain("search_rows", SEARCH_ROW_STRATEGIES)
        self.fields: Dict[str, FallbackChain] = {
            "name": FallbackChain("name", ps.NAME_STRATEGIES),
            "headline": FallbackChain("headline", ps.HEADLINE_STRATEGIES),
            "about": FallbackChain("about", ps.ABOUT_STRATEGIES),
            "skills": FallbackChain("skills", ps.SKILL_STRATEGIES),
            "posts": FallbackChain("posts", ps.POST_STRATEGIES),
            "experiences": FallbackChain("experiences", ps.EXPERIENCE_STRATEGIES),
            "interests": FallbackChain("interests", ps.INTEREST_STRATEGIES),
            "education": FallbackChain("education", ps.EDUCATION_STRATEGIES),
            "location": FallbackChain("location", ps.LOCATION_STRATEGIES),
            "avatar_url": FallbackChain("avatar", ps.AVATAR_STRATEGIES),
        }
        self.email = FallbackChain("email", ps.EMAIL_STRATEGIES)

    def extract_search_results(self, content: str) -> List[CandidateRecord]:
        """Candidate rows of a people-search page, unique by external id, in page order."""
        rows = self.search_rows.run(parse(content)) or []
        unique: List[CandidateRecord] = []
        seen: set[str] = set()
        for row in rows:
            if row.external_id in seen:
                continue
            seen.add(row.external_id)
            unique.append(row)
        return unique

    def extract_profile(self, content: str, contact_content: Optional[str] = None) -> Profile:
        """Profile fields found on the page; a field no strategy finds stays empty.

        ``contact_content`` is the page after the contact-info overlay was opened;
        the email is looked up there first and in ``content`` otherwise.
        """
        soup = parse(content)
        values = {field: chain.run(soup) for field, chain in self.fields.items()}

        address = None
        if contact_content:
            address = self.email.run(parse(contact_content))
        if not address:
            address = self.email.run(soup)

        headline = values["headline"]
        profile = Profile(
            name=values["name"],
            headline=headline,
            location=values["location"],
            company=company_from_headline(headline),
            avatar_url=values["avatar_url"],
            about=values["about"],
            skills=values["skills"] or [],
            posts=values["posts"] or [],
            experiences=values["experiences"] or [],
            interests=values["interests"] or [],
            education=values["education"],
            email=EmailValue.real(address) if address else EmailValue.missing(),
        )
        if profile.company is None and profile.experiences:
            profile.company = profile.experiences[0].company
        logger.debug(
            "profile extracted",
            extra={"step": "extract.profile", "status": "ok"},
        )
        return profile
