from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import List, Optional, Set, Tuple

from models.history import HistoryEntry, HistoryStats
from models.search_criteria import SearchCriteria
from utils.timefmt import from_db, to_db


_COLUMNS = (
    "id, owner_id, profile_id, profile_url, name, headline, location, avatar, "
    "search_criteria_json, search_key, viewed_at"
)


def _row_to_entry(row: tuple) -> HistoryEntry:
    criteria = SearchCriteria(**json.loads(row[8])) if row[8] else SearchCriteria()
    return HistoryEntry(
        id=row[0],
        owner_id=row[1],
        profile_id=row[2],
        profile_url=row[3],
        name=row[4],
        headline=row[5],
        location=row[6],
        avatar=row[7],
        search_criteria=criteria,
        search_key=row[9] or "",
        viewed_at=from_db(row[10]),
    )


class HistoryRepo:
    """Append-only store of profile-view events."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @staticmethod
    def _params(entry: HistoryEntry) -> Tuple:
        return (
            entry.owner_id,
            entry.profile_id,
            entry.profile_url,
            entry.name,
            entry.headline,
            entry.location,
            entry.avatar,
            json.dumps(entry.search_criteria.model_dump(exclude_none=True), ensure_ascii=False, sort_keys=True),
            entry.search_key,
            to_db(entry.viewed_at),
        )

    _INSERT = (
        "INSERT INTO profile_history (owner_id, profile_id, profile_url, name, headline, location, avatar, "
        "search_criteria_json, search_key, viewed_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
    )

    def append(self, entry: HistoryEntry) -> int:
        cur = self.conn.execute(self._INSERT, self._params(entry))
        self.conn.commit()
        return int(cur.lastrowid)

    def append_many(self, entries: List[HistoryEntry]) -> int:
        if not entries:
            return 0
        self.conn.executemany(self._INSERT, [self._params(e) for e in entries])
        self.conn.commit()
        return len(entries)

    def list_for_owner(
        self,
        owner_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[HistoryEntry]:
        """Entries of the owner with viewed_at in [start, end], newest first."""
        sql = f"SELECT {_COLUMNS} FROM profile_history WHERE owner_id = ?"
        params: list = [owner_id]
        if start is not None:
            sql += " AND viewed_at >= ?"
            params.append(to_db(start))
        if end is not None:
            sql += " AND viewed_at <= ?"
            params.append(to_db(end))
        sql += " ORDER BY viewed_at DESC, id DESC"
        cur = self.conn.cursor()
        cur.execute(sql, params)
        return [_row_to_entry(r) for r in cur.fetchall()]

    def viewed_profile_ids(self, owner_id: str) -> Set[str]:
        cur = self.conn.cursor()
        cur.execute("SELECT DISTINCT profile_id FROM profile_history WHERE owner_id = ?", (owner_id,))
        return {r[0] for r in cur.fetchall()}

    def stats(self, owner_id: str) -> HistoryStats:
        cur = self.conn.cursor()
        cur.execute(
            "SELECT COUNT(*), COUNT(DISTINCT search_key), MAX(viewed_at) FROM profile_history WHERE owner_id = ?",
            (owner_id,),
        )
        total, unique_searches, last_viewed = cur.fetchone()
        return HistoryStats(
            total=int(total or 0),
            unique_searches=int(unique_searches or 0),
            last_viewed=from_db(last_viewed),
        )

    def delete_older_than(self, owner_id: str, cutoff: datetime) -> int:
        cur = self.conn.execute(
            "DELETE FROM profile_history WHERE owner_id = ? AND viewed_at < ?",
            (owner_id, to_db(cutoff)),
        )
        self.conn.commit()
        return int(cur.rowcount or 0)
