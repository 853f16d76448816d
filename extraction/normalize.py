from __future__ import annotations

import re
from typing import Iterable, List, Optional


EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
COMPANY_RE = re.compile(r"(?:\s+at\s+|\s+@\s+)(.+?)(?:\s*[|·•]|$)", re.IGNORECASE)
PROFILE_PATH_RE = re.compile(r"/in/([^/?#]+)")

MAX_SKILL_LENGTH = 50
MIN_POST_LENGTH = 20
POST_DEDUP_PREFIX = 100
MAX_POSTS = 5
MAX_ABOUT_LENGTH = 1000
MAX_EXPERIENCES = 3
MAX_INTERESTS = 10

# Placeholder names LinkedIn shows for hidden or restricted profiles
_BLOCKED_NAME_MARKERS = ("privacy", "linkedin")


def collapse_doubled(text: str) -> str:
    """'XX' -> 'X' for a string made of two identical halves."""
    half, rem = divmod(len(text), 2)
    if half and not rem and text[:half] == text[half:]:
        return text[:half]
    words = text.split(" ")
    half, rem = divmod(len(words), 2)
    if half and not rem and words[:half] == words[half:]:
        return " ".join(words[:half])
    return text


def normalize_skills(raw: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    skills: List[str] = []
    for item in raw:
        text = collapse_doubled(" ".join(str(item or "").split()))
        if len(text) < 2 or len(text) > MAX_SKILL_LENGTH:
            continue
        key = text.lower()
        if key in seen:
            continue
        seen.add(key)
        skills.append(text)
    return skills


def normalize_posts(raw: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    posts: List[str] = []
    for item in raw:
        text = " ".join(str(item or "").split())
        if len(text) <= MIN_POST_LENGTH:
            continue
        key = text[:POST_DEDUP_PREFIX]
        if key in seen:
            continue
        seen.add(key)
        posts.append(text)
        if len(posts) >= MAX_POSTS:
            break
    return posts


def normalize_about(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    lines: List[str] = []
    for line in raw.splitlines():
        line = line.strip()
        if line and line not in lines:
            lines.append(line)
    text = "\n".join(lines)[:MAX_ABOUT_LENGTH].strip()
    return text or None


def company_from_headline(headline: Optional[str]) -> Optional[str]:
    if not headline:
        return None
    match = COMPANY_RE.search(headline)
    if not match:
        return None
    return match.group(1).strip() or None


def find_email(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = EMAIL_RE.search(text)
    return match.group(0) if match else None


def is_acceptable_name(name: Optional[str]) -> bool:
    if not name:
        return False
    lowered = name.lower()
    return not any(marker in lowered for marker in _BLOCKED_NAME_MARKERS)


def profile_slug(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = PROFILE_PATH_RE.search(url)
    return match.group(1) if match else None


def strip_query(url: str) -> str:
    return url.split("?", 1)[0].split("#", 1)[0]
