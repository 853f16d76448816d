from __future__ import annotations

import json
from typing import List, Optional
from urllib.parse import quote

from config.locations import lookup_geo_urn
from models.search_criteria import SearchCriteria, SearchRequest


SEARCH_BASE_URL = "https://www.linkedin.com/search/results/people/"


def split_title_company(job_title: Optional[str], company: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """'Title - Company' splits at the first ' - ' when no company was given."""
    title = (job_title or "").strip() or None
    company = (company or "").strip() or None
    if title and not company and " - " in title:
        head, tail = title.split(" - ", 1)
        if head.strip() and tail.strip():
            return head.strip(), tail.strip()
    return title, company


def build(criteria: SearchCriteria, page: int = 1) -> SearchRequest:
    title, company = split_title_company(criteria.job_title, criteria.company)
    industry = (criteria.industry or "").strip() or None
    location = (criteria.keywords or "").strip() or None

    geo_urn = lookup_geo_urn(location) if location else None
    parts: List[str] = [p for p in (title, industry, company) if p]
    if location and not geo_urn:
        parts.append(location)
    keywords = " ".join(" ".join(parts).split())

    params: List[str] = []
    if keywords:
        params.append(f"keywords={quote(keywords, safe='')}")
    if geo_urn:
        params.append(f"geoUrn={quote(json.dumps([geo_urn]), safe='')}")
    if page > 1:
        params.append(f"page={page}")

    return SearchRequest(
        url=f"{SEARCH_BASE_URL}?{'&'.join(params)}" if params else SEARCH_BASE_URL,
        keywords=keywords,
        geo_urn=geo_urn,
        page=page,
    )
