from __future__ import annotations

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from errors import LinkedInEngineError, TransientBrowseFailure
from services.auth_service import normalize_cookie
from services.playwright_browser import PlaywrightBrowser, PlaywrightPage, to_playwright_cookie
from fakes import make_settings


def test_exported_cookie_is_sanitized():
    exported = {
        "name": "li_at",
        "value": "token",
        "domain": ".www.linkedin.com",
        "path": "/",
        "expirationDate": 1900000000,
        "expires": "1900000000.5",
        "sameSite": "no_restriction",
        "hostOnly": False,
        "storeId": "0",
    }
    cookie = to_playwright_cookie(exported)
    assert set(cookie) == {"name", "value", "domain", "path", "expires", "sameSite"}
    assert cookie["expires"] == 1900000000.5
    assert cookie["sameSite"] == "Lax"


def test_session_cookie_and_bad_expiry():
    cookie = to_playwright_cookie(normalize_cookie({"name": "li_at", "value": "t", "expires": -1, "sameSite": "none"}))
    assert "expires" not in cookie
    assert cookie["sameSite"] == "None"
    assert cookie["secure"] is True
    assert cookie["domain"] == ".linkedin.com"


class _ClosedContext:
    async def add_cookies(self, cookies):
        raise PlaywrightError("Target page, context or browser has been closed")

    async def new_page(self):
        raise PlaywrightError("Target page, context or browser has been closed")

    async def close(self):
        return None


class _ClosedBrowser:
    async def new_context(self, **kwargs):
        raise PlaywrightError("Browser has been closed")


def test_cookie_failure_is_a_browse_failure():
    page = PlaywrightPage(_ClosedContext(), page=None)
    with pytest.raises(TransientBrowseFailure) as exc:
        asyncio.run(page.set_cookies([{"name": "li_at", "value": "t", "domain": ".linkedin.com", "path": "/"}]))
    assert isinstance(exc.value, LinkedInEngineError)
    assert "closed" in str(exc.value)


def test_new_context_failure_is_a_browse_failure():
    browser = PlaywrightBrowser(make_settings())
    browser.browser = _ClosedBrowser()
    with pytest.raises(TransientBrowseFailure):
        asyncio.run(browser.new_page())
