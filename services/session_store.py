from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Set

from config.settings import Settings, get_settings
from errors import InvalidSessionTransition, NotAuthenticated
from models.session import Session, SessionState
from ports.repos import SessionsRepoPort
from utils.timefmt import utc_now


logger = logging.getLogger(__name__)


class SessionStore:
    """Per-owner LinkedIn session lifecycle.

    CONNECTED and EXPIRED are derived from the stored row (EXPIRED once
    ``expires_at`` has passed); CONNECTING is held in memory for the duration
    of a login attempt.
    """

    def __init__(
        self,
        repo: SessionsRepoPort,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repo = repo
        self.settings = settings or get_settings()
        self.clock = clock
        self._connecting: Set[str] = set()

    def state(self, owner_id: str) -> SessionState:
        if owner_id in self._connecting:
            return SessionState.CONNECTING
        session = self.repo.get(owner_id)
        if session is None:
            return SessionState.DISCONNECTED
        if session.is_expired(self.clock()):
            return SessionState.EXPIRED
        return SessionState.CONNECTED

    def get_session(self, owner_id: str) -> Optional[Session]:
        return self.repo.get(owner_id)

    def get_active_session(self, owner_id: str) -> Session:
        state = self.state(owner_id)
        if state is SessionState.EXPIRED:
            raise NotAuthenticated(owner_id, reason="LinkedIn session expired")
        if state is not SessionState.CONNECTED:
            raise NotAuthenticated(owner_id)
        session = self.repo.get(owner_id)
        if session is None:
            raise NotAuthenticated(owner_id)
        now = self.clock()
        self.repo.touch(owner_id, now)
        return session.model_copy(update={"last_used_at": now})

    def save_session(
        self,
        owner_id: str,
        cookies: List[Dict[str, Any]],
        ttl: Optional[timedelta] = None,
    ) -> Session:
        if not cookies:
            raise ValueError("cannot save a session without cookies")
        now = self.clock()
        session = Session(
            owner_id=owner_id,
            cookies=cookies,
            captured_at=now,
            expires_at=now + (ttl or timedelta(days=self.settings.session_ttl_days)),
            last_used_at=now,
        )
        self.repo.save(session)
        logger.info(
            "session saved",
            extra={"step": "session.save", "owner": owner_id, "status": f"cookies={len(cookies)}"},
        )
        return session

    def is_expiring_soon(self, session: Session, days: Optional[int] = None) -> bool:
        window = timedelta(days=self.settings.session_warning_days if days is None else days)
        return session.expires_at - self.clock() <= window

    # --- transitions ---

    def begin_login(self, owner_id: str) -> None:
        state = self.state(owner_id)
        if state is SessionState.EXPIRED:
            self.invalidate(owner_id)
            state = SessionState.DISCONNECTED
        if state is not SessionState.DISCONNECTED:
            raise InvalidSessionTransition(owner_id, state.value, SessionState.CONNECTING.value)
        self._connecting.add(owner_id)

    def complete_login(
        self,
        owner_id: str,
        cookies: List[Dict[str, Any]],
        ttl: Optional[timedelta] = None,
    ) -> Session:
        if owner_id not in self._connecting:
            raise InvalidSessionTransition(owner_id, self.state(owner_id).value, SessionState.CONNECTED.value)
        try:
            return self.save_session(owner_id, cookies, ttl)
        finally:
            self._connecting.discard(owner_id)

    def fail_login(self, owner_id: str) -> None:
        if owner_id not in self._connecting:
            raise InvalidSessionTransition(owner_id, self.state(owner_id).value, SessionState.DISCONNECTED.value)
        self._connecting.discard(owner_id)
        logger.info("login failed", extra={"step": "session.login", "owner": owner_id, "status": "failed"})

    def mark_expired(self, owner_id: str) -> None:
        """LinkedIn invalidated the session remotely (redirect to login/authwall)."""
        state = self.state(owner_id)
        if state is SessionState.EXPIRED:
            return
        if state is not SessionState.CONNECTED:
            raise InvalidSessionTransition(owner_id, state.value, SessionState.EXPIRED.value)
        session = self.repo.get(owner_id)
        if session is None:
            return
        self.repo.save(session.model_copy(update={"expires_at": self.clock()}))
        logger.warning("session expired remotely", extra={"step": "session.expire", "owner": owner_id, "status": "expired"})

    def invalidate(self, owner_id: str) -> bool:
        """Explicit logout. Returns False when there was nothing to clear."""
        state = self.state(owner_id)
        if state is SessionState.CONNECTING:
            raise InvalidSessionTransition(owner_id, state.value, SessionState.DISCONNECTED.value)
        removed = self.repo.delete(owner_id)
        if removed:
            logger.info("session cleared", extra={"step": "session.invalidate", "owner": owner_id, "status": "ok"})
        return removed
