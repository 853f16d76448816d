from __future__ import annotations

from typing import Optional

import tldextract


# Result hosts that never point at a company's own site
NON_COMPANY_HOSTS = (
    "linkedin.com",
    "twitter.com",
    "x.com",
    "facebook.com",
    "instagram.com",
    "wikipedia.org",
    "crunchbase.com",
)


def extract_apex_domain(url_or_domain: Optional[str]) -> Optional[str]:
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text.startswith("http://") and not text.startswith("https://"):
        text = f"http://{text}"
    ext = tldextract.extract(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None


def is_company_host(display_link: Optional[str]) -> bool:
    host = (display_link or "").lower()
    return bool(host) and not any(bad in host for bad in NON_COMPANY_HOSTS)
