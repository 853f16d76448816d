from __future__ import annotations

import json
import sqlite3
from typing import List, Optional

from errors import ArchiveConflict
from models.archived_profile import ArchivedProfile
from models.email_value import EmailKind, EmailValue
from utils.timefmt import from_db, to_db


_COLUMNS = (
    "id, owner_id, url, normalized_url, name, headline, location, company, company_domain, "
    "email, email_kind, avatar, about, skills_json, scraped_at, updated_at, version"
)


def _row_to_record(row: tuple) -> ArchivedProfile:
    kind = EmailKind(row[10] or EmailKind.MISSING.value)
    email = EmailValue(kind=kind, address=row[9] if kind is not EmailKind.MISSING else None)
    return ArchivedProfile(
        id=row[0],
        owner_id=row[1],
        url=row[2],
        normalized_url=row[3],
        name=row[4],
        headline=row[5],
        location=row[6],
        company=row[7],
        company_domain=row[8],
        email=email,
        avatar=row[11],
        about=row[12],
        skills=json.loads(row[13]) if row[13] else [],
        scraped_at=from_db(row[14]),
        updated_at=from_db(row[15]),
        version=int(row[16] or 1),
    )


class ArchiveRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get_by_key(self, owner_id: str, normalized_url: str) -> Optional[ArchivedProfile]:
        cur = self.conn.cursor()
        cur.execute(
            f"SELECT {_COLUMNS} FROM archived_profiles WHERE owner_id = ? AND normalized_url = ?",
            (owner_id, normalized_url),
        )
        row = cur.fetchone()
        return _row_to_record(row) if row else None

    def insert(self, record: ArchivedProfile) -> ArchivedProfile:
        """Insert a new archive row; a duplicate key raises ArchiveConflict."""
        try:
            cur = self.conn.execute(
                (
                    "INSERT INTO archived_profiles (owner_id, url, normalized_url, name, headline, location, "
                    "company, company_domain, email, email_kind, avatar, about, skills_json, scraped_at, "
                    "updated_at, version) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 1)"
                ),
                (
                    record.owner_id,
                    record.url,
                    record.normalized_url,
                    record.name,
                    record.headline,
                    record.location,
                    record.company,
                    record.company_domain,
                    record.email.address,
                    record.email.kind.value,
                    record.avatar,
                    record.about,
                    json.dumps(record.skills, ensure_ascii=False),
                    to_db(record.scraped_at),
                    to_db(record.updated_at),
                ),
            )
            self.conn.commit()
        except sqlite3.IntegrityError as e:
            self.conn.rollback()
            raise ArchiveConflict(record.owner_id, record.normalized_url) from e
        return record.model_copy(update={"id": cur.lastrowid, "version": 1})

    def update_if_version(self, record: ArchivedProfile, expected_version: int) -> bool:
        """Write the merged row only if nobody bumped the version since it was read."""
        cur = self.conn.execute(
            (
                "UPDATE archived_profiles SET url = ?, name = ?, headline = ?, location = ?, company = ?, "
                "company_domain = ?, email = ?, email_kind = ?, avatar = ?, about = ?, skills_json = ?, "
                "updated_at = ?, version = version + 1 "
                "WHERE owner_id = ? AND normalized_url = ? AND version = ?"
            ),
            (
                record.url,
                record.name,
                record.headline,
                record.location,
                record.company,
                record.company_domain,
                record.email.address,
                record.email.kind.value,
                record.avatar,
                record.about,
                json.dumps(record.skills, ensure_ascii=False),
                to_db(record.updated_at),
                record.owner_id,
                record.normalized_url,
                expected_version,
            ),
        )
        self.conn.commit()
        return cur.rowcount == 1

    def list_for_owner(self, owner_id: str) -> List[ArchivedProfile]:
        cur = self.conn.cursor()
        cur.execute(
            f"SELECT {_COLUMNS} FROM archived_profiles WHERE owner_id = ? ORDER BY updated_at DESC, id DESC",
            (owner_id,),
        )
        return [_row_to_record(r) for r in cur.fetchall()]
