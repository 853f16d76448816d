from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Core/runtime
    db_path: str
    run_env: str
    log_level: str
    default_owner_id: str

    # Session lifecycle
    session_ttl_days: int
    session_warning_days: int

    # Browse limits/timeouts
    navigation_timeout_seconds: float
    settle_delay_seconds: float
    browse_grace_seconds: float
    contact_reveal_delay_seconds: float
    browser_headless: bool
    browser_executable_path: str | None
    browser_user_agent: str

    # Search paging
    search_target_unique: int
    search_max_pages: int

    # Archive/history
    fallback_email: str | None
    history_retention_days: int

    # Optional: company lookup through Google Custom Search
    company_lookup_enabled: bool = False
    google_api_key: str | None = None
    google_cse_id: str | None = None
    google_search_url: str = "https://www.googleapis.com/customsearch/v1"
    request_timeout_seconds: int = 30

    # Logging/tracing
    browse_trace: bool = False
    browse_log_path: str = "logs/browse_calls.jsonl"

    @property
    def page_visit_timeout_seconds(self) -> float:
        """Hard bound for one navigate + settle + content round trip."""
        return self.navigation_timeout_seconds + self.settle_delay_seconds + self.browse_grace_seconds


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    company_lookup_enabled = _as_bool(os.getenv("COMPANY_LOOKUP_ENABLED"))
    google_api_key = os.getenv("GOOGLE_API_KEY")
    google_cse_id = os.getenv("GOOGLE_CSE_ID")

    if company_lookup_enabled and not (google_api_key and google_cse_id):
        raise RuntimeError(
            "GOOGLE_API_KEY and GOOGLE_CSE_ID required when COMPANY_LOOKUP_ENABLED=true"
        )
    return Settings(
        db_path=os.getenv("DB_PATH", "linkedin_archive.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        default_owner_id=os.getenv("DEFAULT_OWNER_ID", "default"),
        session_ttl_days=int(os.getenv("SESSION_TTL_DAYS", "30")),
        session_warning_days=int(os.getenv("SESSION_WARNING_DAYS", "3")),
        navigation_timeout_seconds=float(os.getenv("NAVIGATION_TIMEOUT_SECONDS", "60")),
        settle_delay_seconds=float(os.getenv("SETTLE_DELAY_SECONDS", "5")),
        browse_grace_seconds=float(os.getenv("BROWSE_GRACE_SECONDS", "15")),
        contact_reveal_delay_seconds=float(os.getenv("CONTACT_REVEAL_DELAY_SECONDS", "2")),
        browser_headless=_as_bool(os.getenv("BROWSER_HEADLESS"), default=True),
        browser_executable_path=os.getenv("BROWSER_EXECUTABLE_PATH") or None,
        browser_user_agent=os.getenv("BROWSER_USER_AGENT", DEFAULT_USER_AGENT),
        search_target_unique=int(os.getenv("SEARCH_TARGET_UNIQUE", "30")),
        search_max_pages=int(os.getenv("SEARCH_MAX_PAGES", "20")),
        fallback_email=os.getenv("FALLBACK_EMAIL") or None,
        history_retention_days=int(os.getenv("HISTORY_RETENTION_DAYS", "90")),
        company_lookup_enabled=company_lookup_enabled,
        google_api_key=google_api_key,
        google_cse_id=google_cse_id,
        google_search_url=os.getenv("GOOGLE_SEARCH_URL", "https://www.googleapis.com/customsearch/v1"),
        request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT", "30")),
        browse_trace=_as_bool(os.getenv("BROWSE_TRACE")),
        browse_log_path=os.getenv("BROWSE_LOG_PATH", "logs/browse_calls.jsonl"),
    )
