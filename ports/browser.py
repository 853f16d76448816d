from __future__ import annotations

from typing import Any, Dict, List, Protocol


class PageControlPort(Protocol):
    """One isolated, rendered page. Never shared between operations."""

    async def navigate(self, url: str, timeout: float) -> None:
        ...

    async def evaluate(self, script: str) -> Any:
        ...

    async def set_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        ...

    async def content(self) -> str:
        ...

    async def current_url(self) -> str:
        ...

    async def close(self) -> None:
        ...


class BrowserPort(Protocol):
    async def new_page(self) -> PageControlPort:
        ...
