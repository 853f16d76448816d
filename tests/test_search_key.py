from __future__ import annotations

from models.search_criteria import SearchCriteria
from services.history_indexer import compute_search_key


def test_search_key_is_order_and_case_independent():
    a = SearchCriteria(job_title="Engineer", keywords="Berlin")
    b = SearchCriteria(keywords="  berlin ", job_title="ENGINEER")
    assert compute_search_key(a) == compute_search_key(b)
    assert compute_search_key(a) == "job_title:engineer|keywords:berlin"


def test_empty_fields_do_not_change_key():
    a = SearchCriteria(company="Acme")
    b = SearchCriteria(company="Acme", industry="", job_title="   ")
    assert compute_search_key(a) == compute_search_key(b) == "company:acme"


def test_empty_criteria_has_empty_key():
    assert compute_search_key(SearchCriteria()) == ""
    assert compute_search_key(None) == ""
