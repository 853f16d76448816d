"""
Scoped page acquisition for browse operations.

Every operation gets its own page with the owner's cookies applied, one
operation per owner at a time, and a hard upper bound on each page visit.
The page is closed on every exit path.
"""
from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from config.settings import Settings, get_settings
from errors import InvalidSessionTransition, NotAuthenticated, TransientBrowseFailure
from ports.browser import BrowserPort, PageControlPort
from services.session_store import SessionStore
from utils.browse_logger import log_browse


logger = logging.getLogger(__name__)

# Landing on any of these after navigation means LinkedIn refused the session
AUTH_WALL_MARKERS = ("/login", "/authwall", "/checkpoint", "/uas/login")

SCROLL_SCRIPT = """
async () => {
  window.scrollTo(0, document.body.scrollHeight);
  await new Promise(r => setTimeout(r, 1000));
  window.scrollTo(0, 0);
}
"""

REVEAL_CONTACT_SCRIPT = """
() => {
  let link = document.querySelector('#top-card-text-details-contact-info');
  if (!link) {
    link = Array.from(document.querySelectorAll('a')).find(a => (a.innerText || '').includes('Contact info'));
  }
  if (!link) return false;
  link.click();
  return true;
}
"""


def is_auth_wall(url: Optional[str]) -> bool:
    return any(marker in (url or "") for marker in AUTH_WALL_MARKERS)


class BrowsePage:
    """A page bound to one owner and one operation."""

    def __init__(self, page: PageControlPort, owner_id: str, store: SessionStore, settings: Settings) -> None:
        self.page = page
        self.owner_id = owner_id
        self.store = store
        self.settings = settings

    async def _bounded(self, awaitable, url: Optional[str], what: str) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.settings.page_visit_timeout_seconds)
        except asyncio.TimeoutError as e:
            raise TransientBrowseFailure(f"{what} timed out", url=url) from e

    async def visit(self, url: str) -> str:
        """Navigate, let the page settle and return its rendered content."""
        started = time.monotonic()
        try:
            content = await self._bounded(self._visit(url), url, "page visit")
        except (TransientBrowseFailure, NotAuthenticated) as e:
            log_browse(
                operation="visit",
                owner_id=self.owner_id,
                url=url,
                duration_ms=int((time.monotonic() - started) * 1000),
                status="error",
                error=type(e).__name__,
            )
            raise
        log_browse(
            operation="visit",
            owner_id=self.owner_id,
            url=url,
            duration_ms=int((time.monotonic() - started) * 1000),
            extras={"content_length": len(content)},
        )
        return content

    async def _visit(self, url: str) -> str:
        await self.page.navigate(url, timeout=self.settings.navigation_timeout_seconds)
        landed = await self.page.current_url()
        if is_auth_wall(landed):
            self._expire()
            raise NotAuthenticated(self.owner_id, reason="LinkedIn session expired")
        if self.settings.settle_delay_seconds > 0:
            await asyncio.sleep(self.settings.settle_delay_seconds)
        return await self.page.content()

    def _expire(self) -> None:
        try:
            self.store.mark_expired(self.owner_id)
        except InvalidSessionTransition as e:
            logger.debug("session already gone", extra={"step": "browse.expire", "owner": self.owner_id, "error": str(e)})

    async def content(self) -> str:
        return await self._bounded(self.page.content(), None, "content read")

    async def evaluate(self, script: str) -> Any:
        return await self._bounded(self.page.evaluate(script), None, "script evaluation")

    async def scroll(self) -> None:
        await self.evaluate(SCROLL_SCRIPT)

    async def reveal_contact(self) -> Optional[str]:
        """Open the contact-info overlay; returns the page content with it open, or None."""
        clicked = await self.evaluate(REVEAL_CONTACT_SCRIPT)
        if not clicked:
            logger.debug("contact info link not found", extra={"step": "browse.contact", "owner": self.owner_id})
            return None
        if self.settings.contact_reveal_delay_seconds > 0:
            await asyncio.sleep(self.settings.contact_reveal_delay_seconds)
        return await self.content()


class BrowseGate:
    """Hands out owner-scoped pages; concurrent requests of one owner queue."""

    def __init__(self, browser: BrowserPort, store: SessionStore, settings: Optional[Settings] = None) -> None:
        self.browser = browser
        self.store = store
        self.settings = settings or get_settings()
        # owner -> [lock, number of operations holding or waiting on it]
        self._locks: Dict[str, list] = {}

    @asynccontextmanager
    async def _owner_lock(self, owner_id: str) -> AsyncIterator[None]:
        entry = self._locks.get(owner_id)
        if entry is None:
            entry = self._locks[owner_id] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[owner_id]

    @asynccontextmanager
    async def page_for(self, owner_id: str) -> AsyncIterator[BrowsePage]:
        async with self._owner_lock(owner_id):
            # Raises NotAuthenticated before any page is opened
            session = self.store.get_active_session(owner_id)
            page = await self.browser.new_page()
            try:
                try:
                    await asyncio.wait_for(
                        page.set_cookies(session.cookies),
                        timeout=self.settings.page_visit_timeout_seconds,
                    )
                except asyncio.TimeoutError as e:
                    raise TransientBrowseFailure("setting session cookies timed out") from e
                yield BrowsePage(page, owner_id, self.store, self.settings)
            finally:
                try:
                    await page.close()
                except Exception as e:
                    logger.debug("page close failed", extra={"step": "browse.close", "owner": owner_id, "error": repr(e)})
