from __future__ import annotations

from extraction.engine import ExtractionEngine
from extraction.search_strategies import legacy_class_rows, stable_attribute_rows
from extraction.dom import parse
from html_fixtures import HEURISTIC_SEARCH_HTML, LEGACY_SEARCH_HTML, STABLE_SEARCH_HTML


def test_stable_rows_are_extracted_and_deduplicated():
    rows = ExtractionEngine().extract_search_results(STABLE_SEARCH_HTML)
    assert [r.external_id for r in rows] == ["jane-doe", "mark-lee"]
    jane = rows[0]
    assert jane.name == "Jane Doe"
    assert jane.url == "https://www.linkedin.com/in/jane-doe"
    assert jane.headline == "Head of Sales at Acme | Speaker"
    assert jane.location == "Berlin, Germany"
    assert jane.company == "Acme GmbH"
    assert jane.summary == "Built sales teams across Europe and Asia."
    assert jane.avatar_url == "https://media.licdn.com/jane.jpg"


def test_placeholder_member_names_are_skipped():
    rows = ExtractionEngine().extract_search_results(STABLE_SEARCH_HTML)
    assert all("hidden" != r.external_id for r in rows)


def test_legacy_markup_only_still_yields_candidates():
    assert stable_attribute_rows(parse(LEGACY_SEARCH_HTML)) == []
    rows = ExtractionEngine().extract_search_results(LEGACY_SEARCH_HTML)
    assert len(rows) == 1
    john = rows[0]
    assert john.name == "John Smith"
    assert john.url == "https://www.linkedin.com/in/john-smith/"
    assert john.company == "Widgets Inc"
    assert john.location == "London"


def test_permalink_heuristic_is_last_resort():
    soup = parse(HEURISTIC_SEARCH_HTML)
    assert stable_attribute_rows(soup) == []
    assert legacy_class_rows(soup) == []
    rows = ExtractionEngine().extract_search_results(HEURISTIC_SEARCH_HTML)
    assert len(rows) == 1
    assert rows[0].external_id == "alex-roe"
    assert rows[0].url == "https://www.linkedin.com/in/alex-roe/"
    assert rows[0].headline == "Product Designer"


def test_empty_page_yields_no_rows():
    assert ExtractionEngine().extract_search_results("<html><body></body></html>") == []
