from __future__ import annotations

from typing import Any

from realm_roster.storage.database import Database

_UPDATABLE_FIELDS = frozenset({"realm_id", "name", "gender", "notes", "updated_at"})


class CharacterRepo:
    """Repository for character records."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def save(self, character_dict: dict) -> None:
        """Insert or update a character record (UPSERT)."""
        data = dict(character_dict)
        columns = ", ".join(data.keys())
        placeholders = ", ".join("?" for _ in data)
        updates = ", ".join(f"{k} = excluded.{k}" for k in data if k != "id")
        sql = (
            f"INSERT INTO characters ({columns}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}"
        )
        with self.db.get_connection() as conn:
            conn.execute(sql, list(data.values()))

    def get(self, character_id: str) -> dict | None:
        """Fetch a character by id."""
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM characters WHERE id = ?", (character_id,)
            ).fetchone()
        return dict(row) if row else None

    def list_by_realm(self, realm_id: str) -> list[dict]:
        """Characters in a realm with their creator's display name."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT c.*, u.name AS user_name FROM characters c "
                "LEFT JOIN users u ON u.id = c.user_id "
                "WHERE c.realm_id = ? ORDER BY c.name COLLATE NOCASE",
                (realm_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def update_fields(self, character_id: str, fields: dict[str, Any]) -> None:
        """Update several columns at once."""
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update character fields: {sorted(unknown)}")
        if not fields:
            return
        assignments = ", ".join(f"{k} = ?" for k in fields)
        with self.db.get_connection() as conn:
            conn.execute(
                f"UPDATE characters SET {assignments} WHERE id = ?",
                [*fields.values(), character_id],
            )

    def delete(self, character_id: str) -> None:
        """Delete a character; its ratings cascade."""
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM characters WHERE id = ?", (character_id,))
