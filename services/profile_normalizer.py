from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote, urlsplit, urlunsplit

from extraction.normalize import is_acceptable_name, profile_slug
from models.email_value import EmailValue
from models.profile import Profile


_EMAIL_SHAPE_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PROFILE_BASE_URL = "https://www.linkedin.com/in/"


def normalize_url(url: str) -> str:
    """Archive comparison key: no query string, fragment or trailing slash."""
    text = (url or "").strip()
    parts = urlsplit(text)
    stripped = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    return stripped.rstrip("/")


def resolve_email(raw: Optional[str]) -> EmailValue:
    candidate = (raw or "").strip()
    if candidate and _EMAIL_SHAPE_RE.match(candidate):
        return EmailValue.real(candidate)
    return EmailValue.missing()


def tag_email(raw: Optional[str], placeholder: Optional[str] = None) -> EmailValue:
    """Like resolve_email, but the configured placeholder address becomes FALLBACK."""
    candidate = (raw or "").strip()
    if placeholder and candidate and candidate.lower() == placeholder.strip().lower():
        return EmailValue.fallback(placeholder.strip())
    return resolve_email(candidate)


def profile_id_from_url(url: Optional[str]) -> Optional[str]:
    slug = profile_slug(url)
    return slug.strip() if slug else None


def profile_url_for(url_or_id: str) -> str:
    """Accept a full profile URL or a bare public id and return a profile URL."""
    text = (url_or_id or "").strip()
    if not text:
        raise ValueError("profile url or id is required")
    if "/in/" in text:
        if text.startswith("http://") or text.startswith("https://"):
            return text
        if text.startswith("/"):
            return f"https://www.linkedin.com{text}"
        return f"https://{text}"
    return f"{PROFILE_BASE_URL}{quote(text.strip('/'), safe='-_.%')}/"


def normalize(
    profile: Profile,
    url: str,
    known_name: Optional[str] = None,
    placeholder_email: Optional[str] = None,
) -> Profile:
    """Attach the caller's URL and identity and re-tag the email."""
    name = profile.name if is_acceptable_name(profile.name) else None
    if not name and known_name and known_name.strip():
        name = known_name.strip()

    email = profile.email
    if email.address:
        email = tag_email(email.address, placeholder_email)

    return profile.model_copy(
        update={
            "url": url,
            "external_id": profile_id_from_url(url) or profile.external_id,
            "name": name,
            "email": email,
        }
    )
