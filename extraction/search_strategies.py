"""
Search-result row strategies, most stable first.

Each strategy is a pure function of the parsed results page and returns a list
of CandidateRecord. An empty list hands over to the next strategy.
"""
from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from extraction.dom import climb, has_class_fragment, text_of
from extraction.normalize import company_from_headline, is_acceptable_name, profile_slug, strip_query
from models.profile import CandidateRecord


LINKEDIN_ORIGIN = "https://www.linkedin.com"


def absolute_url(href: Optional[str]) -> Optional[str]:
    if not href:
        return None
    href = strip_query(href.strip())
    if href.startswith("//"):
        return f"https:{href}"
    if href.startswith("/"):
        return f"{LINKEDIN_ORIGIN}{href}"
    return href


def _image_src(row: Tag) -> Optional[str]:
    img = row.find("img")
    if img is None:
        return None
    src = img.get("src") or img.get("data-delayed-url")
    return src if src and src.startswith("http") else None


def _record(
    href: Optional[str],
    name: Optional[str],
    headline: Optional[str] = None,
    location: Optional[str] = None,
    summary: Optional[str] = None,
    company: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> Optional[CandidateRecord]:
    url = absolute_url(href)
    slug = profile_slug(url)
    if not slug or not is_acceptable_name(name):
        return None
    return CandidateRecord(
        external_id=slug,
        name=name,
        headline=headline or None,
        location=location or None,
        summary=summary or None,
        company=company or company_from_headline(headline),
        url=url,
        avatar_url=avatar_url,
    )


def stable_attribute_rows(soup: BeautifulSoup) -> List[CandidateRecord]:
    records: List[CandidateRecord] = []
    for row in soup.select('div[data-view-name="people-search-result"]'):
        link = row.select_one('a[data-view-name="search-result-lockup-title"]')
        if link is None:
            continue
        headline = location = summary = company = None
        title_paragraph = link.find_parent("p")
        if title_paragraph is not None and title_paragraph.parent is not None:
            paragraphs = [text_of(p) or "" for p in title_paragraph.parent.find_all("p")]
            if len(paragraphs) > 1:
                headline = paragraphs[1]
            if len(paragraphs) > 2:
                location = paragraphs[2]
            for text in paragraphs[3:]:
                if text.startswith("Summary:"):
                    summary = text[len("Summary:"):].strip()
                elif text.startswith("Current:"):
                    current = text[len("Current:"):].strip()
                    company = company_from_headline(current) or current
                elif not summary and len(text) > 20:
                    summary = text
        record = _record(
            link.get("href"),
            text_of(link),
            headline=headline,
            location=location,
            summary=summary,
            company=company,
            avatar_url=_image_src(row),
        )
        if record:
            records.append(record)
    return records


def legacy_class_rows(soup: BeautifulSoup) -> List[CandidateRecord]:
    records: List[CandidateRecord] = []
    for row in soup.select(".entity-result__item, .reusable-search__result-container"):
        link = row.select_one(".entity-result__title-text a")
        if link is None:
            continue
        # Visible name sits in the aria-hidden span; the rest is screen-reader text
        name_el = link.select_one('span[aria-hidden="true"]')
        insight = text_of(row.select_one(".entity-result__simple-insight-text"))
        company = None
        if insight and insight.startswith("Current:"):
            current = insight[len("Current:"):].strip()
            company = company_from_headline(current) or current
        record = _record(
            link.get("href"),
            text_of(name_el) or text_of(link),
            headline=text_of(row.select_one(".entity-result__primary-subtitle")),
            location=text_of(row.select_one(".entity-result__secondary-subtitle")),
            summary=text_of(row.select_one(".entity-result__summary")),
            company=company,
            avatar_url=_image_src(row),
        )
        if record:
            records.append(record)
    return records


def _is_result_block(el: Tag) -> bool:
    return el.name == "li" or (el.name == "div" and has_class_fragment(el, "result"))


def permalink_heuristic_rows(soup: BeautifulSoup) -> List[CandidateRecord]:
    records: List[CandidateRecord] = []
    for link in soup.select('a[href*="/in/"]'):
        if not profile_slug(link.get("href")):
            continue
        block = climb(link, _is_result_block, max_levels=10) or link.parent
        name_el = link.select_one('span[aria-hidden="true"]')
        headline_el = block.select_one("[class*=subtitle]") if block is not None else None
        record = _record(
            link.get("href"),
            text_of(name_el) or text_of(link),
            headline=text_of(headline_el),
            avatar_url=_image_src(block) if block is not None else None,
        )
        if record:
            records.append(record)
    return records


SEARCH_ROW_STRATEGIES = [
    ("stable_attributes", stable_attribute_rows),
    ("legacy_classes", legacy_class_rows),
    ("permalink_heuristic", permalink_heuristic_rows),
]
