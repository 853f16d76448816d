from __future__ import annotations

import logging

from utils.logging_setup import SafeExtraFormatter, redact_cookies


def _format(msg: str, **extra) -> str:
    record = logging.LogRecord("engine", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return SafeExtraFormatter(fmt="%(message)s step=%(step)s owner=%(owner)s error=%(error)s").format(record)


def test_missing_extras_get_defaults():
    assert _format("session saved", owner="owner-a") == "session saved step=- owner=owner-a error=-"


def test_cookie_values_are_masked():
    line = _format("cookie header li_at=AQEDAR-secret; JSESSIONID=\"ajax:123\"", error="{'li_at': 'AQEDAR-secret'}")
    assert "AQEDAR-secret" not in line
    assert "ajax:123" not in line
    assert "li_at=***" in line


def test_redaction_leaves_other_text_alone():
    assert redact_cookies("visited https://www.linkedin.com/in/jane-doe/") == "visited https://www.linkedin.com/in/jane-doe/"
