from __future__ import annotations

from models.search_criteria import SearchCriteria
from services.query_builder import SEARCH_BASE_URL, build, split_title_company


def test_title_company_split_only_when_company_unset():
    assert split_title_company("Head of Sales - Acme", None) == ("Head of Sales", "Acme")
    assert split_title_company("Head of Sales - Acme", "Globex") == ("Head of Sales - Acme", "Globex")
    assert split_title_company("Engineer", None) == ("Engineer", None)


def test_known_location_becomes_geo_filter():
    req = build(SearchCriteria(job_title="Engineer", keywords="  London "))
    assert req.geo_urn == "102257491"
    assert req.keywords == "Engineer"
    assert "geoUrn=%5B%22102257491%22%5D" in req.url
    assert "London" not in req.url


def test_unknown_location_is_added_to_keywords():
    req = build(SearchCriteria(job_title="Head of Sales - Acme", industry="SaaS", keywords="Leipzig"))
    assert req.geo_urn is None
    assert req.keywords == "Head of Sales SaaS Acme Leipzig"
    assert req.url == f"{SEARCH_BASE_URL}?keywords=Head%20of%20Sales%20SaaS%20Acme%20Leipzig"


def test_empty_fields_are_omitted_and_page_appended():
    req = build(SearchCriteria(job_title="  ", company="Acme"), page=3)
    assert req.keywords == "Acme"
    assert req.url.endswith("keywords=Acme&page=3")


def test_empty_criteria_builds_bare_search():
    assert build(SearchCriteria()).url == SEARCH_BASE_URL
