from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create sessions, archive and history tables plus indexes (idempotent)."""
    cur = conn.cursor()

    # One authenticated session per owner; cookies are an opaque JSON blob
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS linkedin_sessions (\n"
            "  owner_id TEXT PRIMARY KEY,\n"
            "  cookies_json TEXT NOT NULL,\n"
            "  captured_at TEXT NOT NULL,\n"
            "  expires_at TEXT NOT NULL,\n"
            "  last_used_at TEXT\n"
            ")"
        )
    )

    # Archive: one row per (owner, normalized profile URL)
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS archived_profiles (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  owner_id TEXT NOT NULL,\n"
            "  url TEXT NOT NULL,\n"
            "  normalized_url TEXT NOT NULL,\n"
            "  name TEXT,\n"
            "  headline TEXT,\n"
            "  location TEXT,\n"
            "  company TEXT,\n"
            "  company_domain TEXT,\n"
            "  email TEXT,\n"
            "  email_kind TEXT NOT NULL DEFAULT 'missing',\n"
            "  avatar TEXT,\n"
            "  about TEXT,\n"
            "  skills_json TEXT,\n"
            "  scraped_at TEXT NOT NULL,\n"
            "  updated_at TEXT NOT NULL,\n"
            "  version INTEGER NOT NULL DEFAULT 1,\n"
            "  UNIQUE(owner_id, normalized_url)\n"
            ")"
        )
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_archived_owner_updated ON archived_profiles(owner_id, updated_at);"
    )

    # View history: append-only, one row per view event
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS profile_history (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  owner_id TEXT NOT NULL,\n"
            "  profile_id TEXT NOT NULL,\n"
            "  profile_url TEXT NOT NULL,\n"
            "  name TEXT,\n"
            "  headline TEXT,\n"
            "  location TEXT,\n"
            "  avatar TEXT,\n"
            "  search_criteria_json TEXT,\n"
            "  search_key TEXT NOT NULL DEFAULT '',\n"
            "  viewed_at TEXT NOT NULL\n"
            ")"
        )
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_history_owner_viewed ON profile_history(owner_id, viewed_at);"
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_history_owner_key ON profile_history(owner_id, search_key);"
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_history_owner_profile ON profile_history(owner_id, profile_id);"
    )

    conn.commit()
