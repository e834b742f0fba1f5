"""Repository for realm-scoped trait definitions."""
from __future__ import annotations

import sqlite3
from typing import Any

from realm_roster.errors import DuplicateTraitName
from realm_roster.storage.database import Database

_UPDATABLE_FIELDS = frozenset({"name", "description", "display_mode"})


class TraitRepo:
    """CRUD for the traits table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def save_trait(self, trait: dict) -> None:
        """Insert a new trait."""
        columns = ", ".join(trait.keys())
        placeholders = ", ".join("?" for _ in trait)
        sql = f"INSERT INTO traits ({columns}) VALUES ({placeholders})"
        try:
            with self.db.get_connection() as conn:
                conn.execute(sql, list(trait.values()))
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc):
                raise DuplicateTraitName(
                    f"Realm {trait.get('realm_id')} already has a trait named {trait.get('name')!r}"
                ) from exc
            raise

    def get(self, trait_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT * FROM traits WHERE id = ?", (trait_id,)).fetchone()
        return dict(row) if row else None

    def list_by_realm(self, realm_id: str) -> list[dict]:
        """All traits of a realm in creation order."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM traits WHERE realm_id = ? ORDER BY created_at, rowid",
                (realm_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def catalog(self, realm_id: str) -> list[dict]:
        """``{id, name}`` for every trait of a realm, in catalog order."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT id, name FROM traits WHERE realm_id = ? ORDER BY created_at, rowid",
                (realm_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def update_fields(self, trait_id: str, fields: dict[str, Any]) -> None:
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update trait fields: {sorted(unknown)}")
        if not fields:
            return
        assignments = ", ".join(f"{k} = ?" for k in fields)
        try:
            with self.db.get_connection() as conn:
                conn.execute(
                    f"UPDATE traits SET {assignments} WHERE id = ?",
                    [*fields.values(), trait_id],
                )
        except sqlite3.IntegrityError as exc:
            if "UNIQUE" in str(exc):
                raise DuplicateTraitName(f"Trait name {fields.get('name')!r} is taken") from exc
            raise

    def delete(self, trait_id: str) -> None:
        """Delete a trait; its ratings cascade."""
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM traits WHERE id = ?", (trait_id,))
