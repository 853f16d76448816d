from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Optional

from models.session import Session
from utils.timefmt import from_db, to_db


class SessionsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, owner_id: str) -> Optional[Session]:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT owner_id, cookies_json, captured_at, expires_at, last_used_at "
            "FROM linkedin_sessions WHERE owner_id = ?",
            (owner_id,),
        )
        row = cur.fetchone()
        if not row:
            return None
        return Session(
            owner_id=row[0],
            cookies=json.loads(row[1] or "[]"),
            captured_at=from_db(row[2]),
            expires_at=from_db(row[3]),
            last_used_at=from_db(row[4]),
        )

    def save(self, session: Session) -> None:
        """Insert or replace the single session row of the owner."""
        self.conn.execute(
            (
                "INSERT INTO linkedin_sessions (owner_id, cookies_json, captured_at, expires_at, last_used_at) "
                "VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(owner_id) DO UPDATE SET "
                " cookies_json = excluded.cookies_json, "
                " captured_at = excluded.captured_at, "
                " expires_at = excluded.expires_at, "
                " last_used_at = excluded.last_used_at"
            ),
            (
                session.owner_id,
                json.dumps(session.cookies),
                to_db(session.captured_at),
                to_db(session.expires_at),
                to_db(session.last_used_at),
            ),
        )
        self.conn.commit()

    def touch(self, owner_id: str, used_at: datetime) -> None:
        self.conn.execute(
            "UPDATE linkedin_sessions SET last_used_at = ? WHERE owner_id = ?",
            (to_db(used_at), owner_id),
        )
        self.conn.commit()

    def delete(self, owner_id: str) -> bool:
        cur = self.conn.execute("DELETE FROM linkedin_sessions WHERE owner_id = ?", (owner_id,))
        self.conn.commit()
        return cur.rowcount > 0
