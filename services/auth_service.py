from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from config.settings import Settings, get_settings
from errors import NotAuthenticated, TransientBrowseFailure
from ports.browser import BrowserPort
from services.browse import is_auth_wall
from services.session_store import SessionStore


logger = logging.getLogger(__name__)

FEED_URL = "https://www.linkedin.com/feed/"
SESSION_COOKIE = "li_at"


def normalize_cookie(cookie: Dict[str, Any]) -> Dict[str, Any]:
    """Fill the attributes a browser needs to accept a LinkedIn cookie."""
    normalized = dict(cookie)
    normalized.setdefault("domain", ".linkedin.com")
    normalized.setdefault("path", "/")
    if normalized.get("httpOnly") is None:
        normalized["httpOnly"] = True
    if normalized.get("secure") is None:
        normalized["secure"] = True
    if not normalized.get("sameSite"):
        normalized["sameSite"] = "Lax"
    return normalized


class LinkedInAuthService:
    def __init__(
        self,
        store: SessionStore,
        browser: Optional[BrowserPort] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.store = store
        self.browser = browser
        self.settings = settings or get_settings()

    async def connect_with_cookie(self, owner_id: str, li_at: str, validate: bool = True):
        value = (li_at or "").strip()
        if not value:
            raise ValueError("li_at cookie value is required")
        return await self.connect_with_cookies(owner_id, [{"name": SESSION_COOKIE, "value": value}], validate=validate)

    async def connect_with_cookies(self, owner_id: str, cookies: List[Dict[str, Any]], validate: bool = True):
        """Run the login transition for an exported cookie set."""
        normalized = [normalize_cookie(c) for c in cookies if c.get("name") and c.get("value")]
        if not any(c["name"] == SESSION_COOKIE for c in normalized):
            raise ValueError(f"cookie set has no {SESSION_COOKIE} session cookie")

        self.store.begin_login(owner_id)
        try:
            if validate:
                await self._validate(owner_id, normalized)
        except BaseException:
            self.store.fail_login(owner_id)
            raise
        session = self.store.complete_login(
            owner_id, normalized, ttl=timedelta(days=self.settings.session_ttl_days)
        )
        logger.info("linkedin connected", extra={"step": "auth.connect", "owner": owner_id, "status": "connected"})
        return session

    async def _validate(self, owner_id: str, cookies: List[Dict[str, Any]]) -> None:
        if self.browser is None:
            raise RuntimeError("a browser is required to validate cookies")
        page = await self.browser.new_page()
        try:
            await page.set_cookies(cookies)
            try:
                await asyncio.wait_for(
                    page.navigate(FEED_URL, timeout=self.settings.navigation_timeout_seconds),
                    timeout=self.settings.page_visit_timeout_seconds,
                )
            except asyncio.TimeoutError as e:
                raise TransientBrowseFailure("timed out validating session", url=FEED_URL) from e
            landed = await page.current_url()
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.debug("page close failed", extra={"step": "auth.validate", "error": repr(e)})
        if is_auth_wall(landed) or "/feed" not in landed:
            raise NotAuthenticated(owner_id, reason="LinkedIn rejected the session cookie")

    def status(self, owner_id: str) -> Dict[str, Any]:
        state = self.store.state(owner_id)
        session = self.store.get_session(owner_id)
        payload: Dict[str, Any] = {"owner_id": owner_id, "state": state.value, "connected": state.value == "connected"}
        if session is not None:
            payload["expires_at"] = session.expires_at.isoformat()
            payload["last_used_at"] = session.last_used_at.isoformat() if session.last_used_at else None
            payload["expiring_soon"] = self.store.is_expiring_soon(session)
        return payload

    def logout(self, owner_id: str) -> bool:
        return self.store.invalidate(owner_id)
