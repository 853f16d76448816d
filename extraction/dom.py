from __future__ import annotations

from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup, Tag


def parse(content: str) -> BeautifulSoup:
    return BeautifulSoup(content or "", "html.parser")


def text_of(el: Optional[Tag]) -> Optional[str]:
    """Visible text of an element with whitespace collapsed, or None if blank."""
    if el is None:
        return None
    text = " ".join(el.get_text(" ", strip=True).split())
    return text or None


def first_text(root: Tag, selectors: Iterable[str]) -> Optional[str]:
    for selector in selectors:
        for el in root.select(selector):
            text = text_of(el)
            if text:
                return text
    return None


def climb(el: Tag, predicate: Callable[[Tag], bool], max_levels: int) -> Optional[Tag]:
    """Walk up at most ``max_levels`` ancestors and return the first matching one."""
    current = el.parent
    levels = 0
    while isinstance(current, Tag) and levels < max_levels:
        if predicate(current):
            return current
        current = current.parent
        levels += 1
    return None


def has_class_fragment(el: Tag, fragment: str) -> bool:
    return any(fragment in c for c in (el.get("class") or []))


def find_heading(root: Tag, label: str) -> Optional[Tag]:
    """First h2/h3/span/div whose own text is exactly ``label`` (case-insensitive)."""
    wanted = label.strip().lower()
    for el in root.find_all(["h2", "h3", "span", "div"]):
        text = text_of(el)
        if text and text.lower() == wanted:
            return el
    return None
