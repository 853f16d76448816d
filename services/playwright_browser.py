from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from config.settings import Settings, get_settings
from errors import TransientBrowseFailure


logger = logging.getLogger(__name__)

_COOKIE_KEYS = ("name", "value", "url", "domain", "path", "expires", "httpOnly", "secure", "sameSite")
_SAME_SITE = {"strict": "Strict", "lax": "Lax", "none": "None"}

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--no-first-run",
    "--no-default-browser-check",
]


def to_playwright_cookie(cookie: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the attributes add_cookies accepts, in the casing it expects."""
    out = {k: cookie[k] for k in _COOKIE_KEYS if cookie.get(k) is not None}
    same_site = str(out.get("sameSite") or "Lax").lower()
    out["sameSite"] = _SAME_SITE.get(same_site, "Lax")
    expires = out.get("expires")
    if expires is not None:
        try:
            out["expires"] = float(expires)
        except (TypeError, ValueError):
            out.pop("expires")
        else:
            if out["expires"] <= 0:
                out.pop("expires")
    return out


class PlaywrightPage:
    """PageControlPort over one Playwright page living in its own browser context."""

    def __init__(self, context: BrowserContext, page: Page) -> None:
        self.context = context
        self.page = page

    async def navigate(self, url: str, timeout: float) -> None:
        try:
            await self.page.goto(url, wait_until="domcontentloaded", timeout=int(timeout * 1000))
        except PlaywrightTimeoutError as e:
            raise TransientBrowseFailure("navigation timed out", url=url) from e
        except PlaywrightError as e:
            raise TransientBrowseFailure(f"navigation failed: {e.message}", url=url) from e

    async def evaluate(self, script: str) -> Any:
        try:
            return await self.page.evaluate(script)
        except PlaywrightError as e:
            raise TransientBrowseFailure(f"script evaluation failed: {e.message}", url=self.page.url) from e

    async def set_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        try:
            await self.context.add_cookies([to_playwright_cookie(c) for c in cookies])
        except PlaywrightError as e:
            raise TransientBrowseFailure(f"setting cookies failed: {e.message}") from e

    async def content(self) -> str:
        try:
            return await self.page.content()
        except PlaywrightError as e:
            raise TransientBrowseFailure(f"content read failed: {e.message}", url=self.page.url) from e

    async def current_url(self) -> str:
        return self.page.url

    async def close(self) -> None:
        try:
            await self.page.close()
        except PlaywrightError as e:
            logger.debug("page close note: %s", type(e).__name__)
        try:
            await self.context.close()
        except PlaywrightError as e:
            logger.debug("context close note: %s", type(e).__name__)


class PlaywrightBrowser:
    """BrowserPort backed by one Chromium process; every page gets a fresh context."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._playwright = None
        self.browser: Optional[Browser] = None

    async def start(self) -> "PlaywrightBrowser":
        if self.browser is not None:
            return self
        self._playwright = await async_playwright().start()
        try:
            self.browser = await self._playwright.chromium.launch(
                headless=self.settings.browser_headless,
                executable_path=self.settings.browser_executable_path,
                args=LAUNCH_ARGS,
                ignore_default_args=["--enable-automation"],
            )
        except PlaywrightError as e:
            await self._playwright.stop()
            self._playwright = None
            raise TransientBrowseFailure(f"browser launch failed: {e.message}") from e
        logger.info("browser started", extra={"step": "browser.start", "status": "ok"})
        return self

    async def new_page(self) -> PlaywrightPage:
        await self.start()
        try:
            context = await self.browser.new_context(
                user_agent=self.settings.browser_user_agent,
                viewport={"width": 1920, "height": 1080},
                locale="en-US",
            )
        except PlaywrightError as e:
            raise TransientBrowseFailure(f"new browser context failed: {e.message}") from e
        try:
            page = await context.new_page()
            await page.add_init_script("Object.defineProperty(navigator, 'webdriver', { get: () => undefined });")
        except PlaywrightError as e:
            await context.close()
            raise TransientBrowseFailure(f"new page failed: {e.message}") from e
        return PlaywrightPage(context, page)

    async def stop(self) -> None:
        if self.browser is not None:
            try:
                await self.browser.close()
            except PlaywrightError as e:
                logger.debug("browser close note: %s", type(e).__name__)
            self.browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def __aenter__(self) -> "PlaywrightBrowser":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
