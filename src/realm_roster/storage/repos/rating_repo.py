"""Repository for character trait ratings and the rating summary read model."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable

from realm_roster.storage.database import Database


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RatingRepo:
    """CRUD for the character_trait_ratings table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def upsert(self, character_id: str, trait_id: str, value: int) -> str:
        """Create or update the rating for a (character, trait) pair. Returns its id."""
        now = _now()
        with self.db.get_connection() as conn:
            conn.execute(
                """INSERT INTO character_trait_ratings
                (id, character_id, trait_id, value, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(character_id, trait_id)
                DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at""",
                (str(uuid.uuid4()), character_id, trait_id, value, now, now),
            )
            row = conn.execute(
                "SELECT id FROM character_trait_ratings WHERE character_id = ? AND trait_id = ?",
                (character_id, trait_id),
            ).fetchone()
        return row["id"]

    def insert_ignore_conflicts(self, ratings: Iterable[dict]) -> int:
        """Insert ``{character_id, trait_id, value}`` rows, skipping existing pairs.

        Returns the number of rows actually inserted.
        """
        now = _now()
        inserted = 0
        with self.db.get_connection() as conn:
            for r in ratings:
                cur = conn.execute(
                    """INSERT INTO character_trait_ratings
                    (id, character_id, trait_id, value, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT(character_id, trait_id) DO NOTHING""",
                    (str(uuid.uuid4()), r["character_id"], r["trait_id"], r["value"], now, now),
                )
                inserted += cur.rowcount
        return inserted

    def delete_many(self, rating_ids: list[str]) -> int:
        if not rating_ids:
            return 0
        placeholders = ", ".join("?" for _ in rating_ids)
        with self.db.get_connection() as conn:
            cur = conn.execute(
                f"DELETE FROM character_trait_ratings WHERE id IN ({placeholders})",
                rating_ids,
            )
        return cur.rowcount

    def delete(self, rating_id: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM character_trait_ratings WHERE id = ?", (rating_id,))

    def get(self, rating_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT id, character_id, trait_id, value FROM character_trait_ratings WHERE id = ?",
                (rating_id,),
            ).fetchone()
        return dict(row) if row else None

    def get_by_pair(self, character_id: str, trait_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT id, character_id, trait_id, value FROM character_trait_ratings "
                "WHERE character_id = ? AND trait_id = ?",
                (character_id, trait_id),
            ).fetchone()
        return dict(row) if row else None

    def list_by_character(self, character_id: str) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT id, character_id, trait_id, value FROM character_trait_ratings "
                "WHERE character_id = ? ORDER BY created_at, rowid",
                (character_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def list_with_trait_names(self, character_id: str) -> list[dict]:
        """``{rating_id, trait_id, trait_name, value}`` for each of a character's ratings."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT r.id AS rating_id, r.trait_id, t.name AS trait_name, r.value "
                "FROM character_trait_ratings r "
                "JOIN traits t ON t.id = r.trait_id "
                "WHERE r.character_id = ? ORDER BY r.created_at, r.rowid",
                (character_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def summaries_for_realm(self, realm_id: str, character_ids: list[str]) -> dict[str, list[dict]]:
        """One summary row per (character, trait of the realm), rated or not.

        Single query; characters not in ``character_ids`` are ignored.
        """
        if not character_ids:
            return {}
        placeholders = ", ".join("?" for _ in character_ids)
        sql = (
            "SELECT c.id AS character_id, t.id AS trait_id, t.name AS trait_name, "
            "t.description, t.display_mode, r.id AS rating_id, r.value "
            "FROM characters c "
            "JOIN traits t ON t.realm_id = c.realm_id "
            "LEFT JOIN character_trait_ratings r "
            "ON r.trait_id = t.id AND r.character_id = c.id "
            f"WHERE t.realm_id = ? AND c.id IN ({placeholders}) "
            "ORDER BY t.created_at, t.rowid"
        )
        with self.db.get_connection() as conn:
            rows = conn.execute(sql, [realm_id, *character_ids]).fetchall()
        out: dict[str, list[dict]] = {cid: [] for cid in character_ids}
        for row in rows:
            entry = dict(row)
            out[entry.pop("character_id")].append(entry)
        return out
