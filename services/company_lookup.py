"""
Optional company-domain resolution through Google Custom Search.

Failures never propagate: an unreachable API or an empty result just means
the profile keeps no company domain.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from config.settings import Settings, get_settings
from services.domain_utils import extract_apex_domain, is_company_host


logger = logging.getLogger(__name__)


class GoogleCompanyLookup:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self._cache: Dict[str, Optional[str]] = {}
        if not self.settings.google_api_key or not self.settings.google_cse_id:
            raise ValueError("Google API key and Custom Search Engine ID must be set in .env file")

    def resolve_domain(self, company: str) -> Optional[str]:
        name = " ".join((company or "").split())
        if not name:
            return None
        key = name.lower()
        if key in self._cache:
            return self._cache[key]
        domain = self._search(name)
        self._cache[key] = domain
        return domain

    def _search(self, name: str) -> Optional[str]:
        params = {
            "key": self.settings.google_api_key,
            "cx": self.settings.google_cse_id,
            "q": name,
            "num": 5,
        }
        try:
            resp = self.session.get(
                self.settings.google_search_url,
                params=params,
                timeout=self.settings.request_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("company lookup request failed", extra={"step": "lookup.company", "error": repr(e)})
            return None
        if resp.status_code != 200:
            logger.warning(
                "company lookup failed",
                extra={"step": "lookup.company", "status": resp.status_code},
            )
            return None
        try:
            items = (resp.json() or {}).get("items") or []
        except ValueError:
            return None
        for item in items:
            link = item.get("link")
            if not link or not is_company_host(item.get("displayLink") or link):
                continue
            apex = extract_apex_domain(link)
            if apex:
                return apex
        return None


def build_company_lookup(settings: Optional[Settings] = None) -> Optional[GoogleCompanyLookup]:
    settings = settings or get_settings()
    if not settings.company_lookup_enabled:
        return None
    return GoogleCompanyLookup(settings)
