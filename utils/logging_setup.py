from __future__ import annotations

import logging
import re
import sys
from typing import Any

from config.settings import get_settings


_INITIALIZED: bool = False

# li_at / JSESSIONID values must never reach a log line
_COOKIE_VALUE_RE = re.compile(r"(?i)\b(li_at|jsessionid|li_rm)([\"']?\s*[:=]\s*[\"']?)([^\s\"';,&]+)")


def redact_cookies(text: str) -> str:
    return _COOKIE_VALUE_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}***", text)


class SafeExtraFormatter(logging.Formatter):
    """Injects defaults for the structured extras and masks session cookie values."""

    DEFAULTS: dict[str, Any] = {
        "step": "-",
        "status": "-",
        "duration_ms": "-",
        "owner": "-",
        "error": "-",
        "run_id": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return redact_cookies(super().format(record))


def init_logging(level: str | None = None) -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return

    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # stdout carries command output (JSON), so logs go to stderr
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(
            SafeExtraFormatter(
                fmt=(
                    "%(asctime)s %(levelname)s %(name)s %(message)s "
                    "step=%(step)s status=%(status)s duration_ms=%(duration_ms)s "
                    "owner=%(owner)s error=%(error)s run_id=%(run_id)s"
                )
            )
        )
        root_logger.addHandler(handler)

    # Third-party debug chatter stays out of the engine log
    for noisy in ("urllib3", "asyncio"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.WARNING))

    _INITIALIZED = True
