from __future__ import annotations

import asyncio

import pytest

from db.repos.sessions_repo import SessionsRepo
from errors import NotAuthenticated, TransientBrowseFailure
from models.session import SessionState
from services.browse import BrowseGate, is_auth_wall
from services.session_store import SessionStore
from fakes import FakeBrowser, make_settings


COOKIES = [{"name": "li_at", "value": "token", "domain": ".linkedin.com", "path": "/"}]
PROFILE_URL = "https://www.linkedin.com/in/jane-doe/"


def _connected_gate(conn, browser, **settings_overrides) -> BrowseGate:
    settings = make_settings(**settings_overrides)
    store = SessionStore(SessionsRepo(conn), settings=settings)
    store.save_session("owner-a", COOKIES)
    return BrowseGate(browser, store, settings)


def test_auth_wall_detection():
    assert is_auth_wall("https://www.linkedin.com/authwall?trk=x")
    assert is_auth_wall("https://www.linkedin.com/login")
    assert not is_auth_wall("https://www.linkedin.com/in/jane-doe/")
    assert not is_auth_wall(None)


def test_visit_returns_content_with_cookies_applied(conn):
    browser = FakeBrowser(lambda url: f"<html>{url}</html>")
    gate = _connected_gate(conn, browser)

    async def run():
        async with gate.page_for("owner-a") as page:
            return await page.visit(PROFILE_URL)

    assert asyncio.run(run()) == f"<html>{PROFILE_URL}</html>"
    assert browser.pages[0].cookies == COOKIES
    assert browser.pages[0].closed is True


def test_hanging_navigation_is_bounded_and_page_closed(conn):
    browser = FakeBrowser(hang=True)
    gate = _connected_gate(conn, browser)

    async def run():
        async with gate.page_for("owner-a") as page:
            await page.visit(PROFILE_URL)

    with pytest.raises(TransientBrowseFailure) as exc:
        asyncio.run(run())
    assert exc.value.url == PROFILE_URL
    assert browser.pages[0].closed is True
    assert browser.open_now == 0


def test_auth_wall_redirect_expires_session(conn):
    browser = FakeBrowser(redirects={PROFILE_URL: "https://www.linkedin.com/authwall?sessionRedirect=x"})
    gate = _connected_gate(conn, browser)

    async def run():
        async with gate.page_for("owner-a") as page:
            await page.visit(PROFILE_URL)

    with pytest.raises(NotAuthenticated):
        asyncio.run(run())
    assert gate.store.state("owner-a") is SessionState.EXPIRED
    assert browser.open_now == 0


def test_no_page_is_opened_without_session(conn):
    browser = FakeBrowser()
    settings = make_settings()
    gate = BrowseGate(browser, SessionStore(SessionsRepo(conn), settings=settings), settings)

    async def run():
        async with gate.page_for("owner-a"):
            pass

    with pytest.raises(NotAuthenticated):
        asyncio.run(run())
    assert browser.pages == []


def test_operations_of_one_owner_are_serialized(conn):
    browser = FakeBrowser()
    gate = _connected_gate(conn, browser)

    async def one(i: int):
        async with gate.page_for("owner-a") as page:
            await page.visit(f"{PROFILE_URL}?n={i}")

    async def run():
        await asyncio.gather(*(one(i) for i in range(4)))

    asyncio.run(run())
    assert len(browser.pages) == 4
    assert browser.max_open == 1


def test_reveal_contact_without_link_returns_none(conn):
    browser = FakeBrowser()
    gate = _connected_gate(conn, browser)

    async def run():
        async with gate.page_for("owner-a") as page:
            await page.visit(PROFILE_URL)
            return await page.reveal_contact()

    assert asyncio.run(run()) is None


def test_hanging_cookie_setup_is_bounded_and_page_closed(conn):
    browser = FakeBrowser(hang_cookies=True)
    gate = _connected_gate(conn, browser)

    async def run():
        async with gate.page_for("owner-a") as page:
            await page.visit(PROFILE_URL)

    with pytest.raises(TransientBrowseFailure):
        asyncio.run(run())
    assert browser.pages[0].visited == []
    assert browser.open_now == 0


def test_owner_locks_are_released_after_operations(conn):
    browser = FakeBrowser()
    gate = _connected_gate(conn, browser)

    async def one(i: int):
        async with gate.page_for("owner-a") as page:
            await page.visit(f"{PROFILE_URL}?n={i}")

    async def run():
        await asyncio.gather(*(one(i) for i in range(3)))
        assert gate._locks == {}
        with pytest.raises(NotAuthenticated):
            async with gate.page_for("owner-b"):
                pass
        assert gate._locks == {}

    asyncio.run(run())
    assert browser.max_open == 1
