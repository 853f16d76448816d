"""
Per-field strategies for a rendered profile page.

Strategies for one field are ordered: stable attribute or heading-class
selectors first, legacy class names next, then heading/ancestor heuristics.
"""
from __future__ import annotations

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from extraction.dom import climb, find_heading, first_text, has_class_fragment, text_of
from extraction.normalize import (
    MAX_EXPERIENCES,
    MAX_INTERESTS,
    find_email,
    is_acceptable_name,
    normalize_about,
    normalize_posts,
    normalize_skills,
)
from models.profile import Experience


_NAME_SELECTORS = (
    "h1.text-heading-xlarge",
    "h1.inline.t-24.v-align-middle.break-words",
    ".pv-text-details__left-panel h1",
    "div.ph5 h1",
)
_NOTIFICATION_BADGE_RE = re.compile(r"^\(\d+\)\s+")


def _acceptable(text: Optional[str]) -> Optional[str]:
    if text and len(text) > 2 and is_acceptable_name(text):
        return text
    return None


def _section_of(heading: Tag) -> Optional[Tag]:
    return climb(
        heading,
        lambda el: el.name == "section" or has_class_fragment(el, "card"),
        max_levels=5,
    )


# --- name ---

def name_from_heading_classes(soup: BeautifulSoup) -> Optional[str]:
    for selector in _NAME_SELECTORS:
        for el in soup.select(selector):
            name = _acceptable(text_of(el))
            if name:
                return name
    return None


def name_from_title(soup: BeautifulSoup) -> Optional[str]:
    title = text_of(soup.title)
    if not title:
        return None
    name = title.split("|", 1)[0].strip()
    return _acceptable(_NOTIFICATION_BADGE_RE.sub("", name))


def name_from_any_h1(soup: BeautifulSoup) -> Optional[str]:
    return _acceptable(text_of(soup.find("h1")))


NAME_STRATEGIES = [
    ("heading_classes", name_from_heading_classes),
    ("document_title", name_from_title),
    ("any_h1", name_from_any_h1),
]


# --- headline ---

def headline_from_class(soup: BeautifulSoup) -> Optional[str]:
    return first_text(soup, [".text-body-medium"])


def headline_after_h1(soup: BeautifulSoup) -> Optional[str]:
    h1 = soup.find("h1")
    if h1 is None:
        return None
    sibling = h1.find_next_sibling()
    return text_of(sibling)


HEADLINE_STRATEGIES = [
    ("body_medium_class", headline_from_class),
    ("h1_sibling", headline_after_h1),
]


# --- about ---

def _about_text(el: Optional[Tag]) -> Optional[str]:
    if el is None:
        return None
    return normalize_about(el.get_text("\n", strip=True))


def about_from_field(soup: BeautifulSoup) -> Optional[str]:
    section = soup.select_one("section:has(> #about)") or soup.select_one("#about ~ div")
    if section is None:
        return None
    return _about_text(section.select_one(".inline-show-more-text, .pv-shared-text-with-see-more"))


def about_from_legacy_class(soup: BeautifulSoup) -> Optional[str]:
    return _about_text(soup.select_one(".pv-about__summary-text, .pv-about-section"))


def about_from_heading(soup: BeautifulSoup) -> Optional[str]:
    heading = find_heading(soup, "About")
    if heading is None:
        return None
    container = _section_of(heading)
    if container is None:
        return None
    text_el = container.select_one(".inline-show-more-text, .pv-shared-text-with-see-more")
    if text_el is not None:
        return _about_text(text_el)
    lines = [
        line for line in container.get_text("\n", strip=True).splitlines()
        if line.strip().lower() != "about"
    ]
    return normalize_about("\n".join(lines))


ABOUT_STRATEGIES = [
    ("anchor_section", about_from_field),
    ("legacy_classes", about_from_legacy_class),
    ("about_heading", about_from_heading),
]


# --- skills ---

def skills_from_data_field(soup: BeautifulSoup) -> List[str]:
    return normalize_skills(
        text_of(el) or "" for el in soup.select('[data-field="skill_card_skill_topic"] .mr1')
    )


def skills_from_legacy_classes(soup: BeautifulSoup) -> List[str]:
    return normalize_skills(
        text_of(el) or ""
        for el in soup.select(".pv-skill-category-entity__name, .artdeco-list__item .hoverable-link-text")
    )


def skills_from_heading(soup: BeautifulSoup) -> List[str]:
    heading = find_heading(soup, "Skills")
    if heading is None:
        return []
    container = _section_of(heading)
    if container is None:
        return []
    raw: List[str] = []
    for item in container.select("li, .pvs-list__item--line-separated, .artdeco-list__item"):
        text_el = item.select_one('span[aria-hidden="true"]') or item.select_one(".mr1") or item
        text = text_of(text_el)
        if text and text != "Skills" and "Endorsed" not in text:
            raw.append(text)
    return normalize_skills(raw)


SKILL_STRATEGIES = [
    ("skill_data_field", skills_from_data_field),
    ("legacy_classes", skills_from_legacy_classes),
    ("skills_heading", skills_from_heading),
]


# --- posts ---

def posts_from_update_components(soup: BeautifulSoup) -> List[str]:
    return normalize_posts(text_of(el) or "" for el in soup.select(".update-components-text"))


def posts_from_legacy_feed(soup: BeautifulSoup) -> List[str]:
    return normalize_posts(
        text_of(el) or ""
        for el in soup.select(".feed-shared-update-v2__description, .feed-shared-text")
    )


def posts_from_activity_heading(soup: BeautifulSoup) -> List[str]:
    heading = find_heading(soup, "Activity")
    if heading is None:
        return []
    container = _section_of(heading)
    if container is None:
        return []
    return normalize_posts(text_of(el) or "" for el in container.select('span[dir="ltr"]'))


POST_STRATEGIES = [
    ("update_components", posts_from_update_components),
    ("legacy_feed", posts_from_legacy_feed),
    ("activity_heading", posts_from_activity_heading),
]


# --- experiences ---

def _experiences_from(items: List[Tag]) -> List[Experience]:
    experiences: List[Experience] = []
    for el in items:
        title = text_of(el.select_one('.mr1 span[aria-hidden="true"]'))
        company = text_of(el.select_one('.t-14.t-normal span[aria-hidden="true"]'))
        if title:
            experiences.append(Experience(title=title, company=company))
        if len(experiences) >= MAX_EXPERIENCES:
            break
    return experiences


def experiences_from_anchor(soup: BeautifulSoup) -> List[Experience]:
    return _experiences_from(soup.select("#experience ~ .pvs-list__outer-container .pvs-entity"))


def experiences_from_legacy_pager(soup: BeautifulSoup) -> List[Experience]:
    return _experiences_from(soup.select(".pv-entity__position-group-pager li"))


def experiences_from_heading(soup: BeautifulSoup) -> List[Experience]:
    heading = find_heading(soup, "Experience")
    if heading is None:
        return []
    container = _section_of(heading)
    if container is None:
        return []
    return _experiences_from(container.select("li"))


EXPERIENCE_STRATEGIES = [
    ("experience_anchor", experiences_from_anchor),
    ("legacy_position_pager", experiences_from_legacy_pager),
    ("experience_heading", experiences_from_heading),
]


# --- interests ---

def interests_from_data_field(soup: BeautifulSoup) -> List[str]:
    return [t for t in (text_of(el) for el in soup.select('[data-field="interests_entity_name"]')) if t][:MAX_INTERESTS]


def interests_from_legacy_class(soup: BeautifulSoup) -> List[str]:
    return [t for t in (text_of(el) for el in soup.select(".pv-interest-entity__name")) if t][:MAX_INTERESTS]


INTEREST_STRATEGIES = [
    ("interest_data_field", interests_from_data_field),
    ("legacy_classes", interests_from_legacy_class),
]


# --- education ---

def education_from_data_field(soup: BeautifulSoup) -> Optional[str]:
    return first_text(soup, ['[data-field="school_name"]'])


def education_from_legacy_class(soup: BeautifulSoup) -> Optional[str]:
    return first_text(soup, [".pv-entity__school-name"])


def education_from_heading(soup: BeautifulSoup) -> Optional[str]:
    heading = find_heading(soup, "Education")
    if heading is None:
        return None
    container = _section_of(heading)
    if container is None:
        return None
    return first_text(container, ['li span[aria-hidden="true"]', "li"])


EDUCATION_STRATEGIES = [
    ("school_data_field", education_from_data_field),
    ("legacy_classes", education_from_legacy_class),
    ("education_heading", education_from_heading),
]


# --- location ---

def location_from_data_field(soup: BeautifulSoup) -> Optional[str]:
    return first_text(soup, ['[data-field="location_name"]'])


def location_from_top_card_class(soup: BeautifulSoup) -> Optional[str]:
    return first_text(soup, [".text-body-small.inline.t-black--light.break-words"])


LOCATION_STRATEGIES = [
    ("location_data_field", location_from_data_field),
    ("top_card_class", location_from_top_card_class),
]


# --- avatar ---

def _http_src(el: Optional[Tag]) -> Optional[str]:
    if el is None:
        return None
    for attr in ("src", "data-delayed-url"):
        value = el.get(attr)
        if value and value.startswith("http"):
            return value
    return None


def avatar_from_top_card(soup: BeautifulSoup) -> Optional[str]:
    for el in soup.select("img.pv-top-card-profile-picture__image--show, img.pv-top-card-profile-picture__image"):
        src = _http_src(el)
        if src:
            return src
    return None


def avatar_from_delayed_url(soup: BeautifulSoup) -> Optional[str]:
    for el in soup.select("img[data-delayed-url*=profile], img.profile-photo-edit__preview"):
        src = _http_src(el)
        if src:
            return src
    return None


AVATAR_STRATEGIES = [
    ("top_card_image", avatar_from_top_card),
    ("delayed_url_image", avatar_from_delayed_url),
]


# --- email ---

def email_from_contact_links(soup: BeautifulSoup) -> Optional[str]:
    for el in soup.select('a[href^="mailto:"]'):
        address = find_email(el.get("href", "")[len("mailto:"):])
        if address:
            return address
    return None


def email_from_contact_section(soup: BeautifulSoup) -> Optional[str]:
    return find_email(text_of(soup.select_one(".pv-contact-info__contact-type, section.ci-email")))


def email_from_visible_text(soup: BeautifulSoup) -> Optional[str]:
    return find_email(text_of(soup.body or soup))


EMAIL_STRATEGIES = [
    ("mailto_link", email_from_contact_links),
    ("contact_section", email_from_contact_section),
    ("visible_text_scan", email_from_visible_text),
]
