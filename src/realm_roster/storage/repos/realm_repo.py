"""Repository for realms, their members and user display names."""
from __future__ import annotations

from realm_roster.storage.database import Database


class RealmRepo:
    """CRUD for realms, realm_members and users tables."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # -- Realms --

    def save(self, realm: dict) -> None:
        """Insert or update a realm record (UPSERT)."""
        columns = ", ".join(realm.keys())
        placeholders = ", ".join("?" for _ in realm)
        updates = ", ".join(f"{k} = excluded.{k}" for k in realm if k != "id")
        sql = (
            f"INSERT INTO realms ({columns}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}"
        )
        with self.db.get_connection() as conn:
            conn.execute(sql, list(realm.values()))

    def get(self, realm_id: str) -> dict | None:
        with self.db.get_connection() as conn:
            row = conn.execute("SELECT * FROM realms WHERE id = ?", (realm_id,)).fetchone()
        return dict(row) if row else None

    def list_for_user(self, user_id: str) -> list[dict]:
        """Realms the user belongs to, by name."""
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT r.* FROM realms r "
                "JOIN realm_members m ON m.realm_id = r.id "
                "WHERE m.user_id = ? ORDER BY r.name",
                (user_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    def delete(self, realm_id: str) -> None:
        """Delete a realm; characters, traits and ratings cascade."""
        with self.db.get_connection() as conn:
            conn.execute("DELETE FROM realms WHERE id = ?", (realm_id,))

    # -- Members --

    def add_member(self, member: dict) -> None:
        """Insert a membership; joining twice is a no-op."""
        columns = ", ".join(member.keys())
        placeholders = ", ".join("?" for _ in member)
        with self.db.get_connection() as conn:
            conn.execute(
                f"INSERT INTO realm_members ({columns}) VALUES ({placeholders}) "
                f"ON CONFLICT(realm_id, user_id) DO NOTHING",
                list(member.values()),
            )

    def remove_member(self, realm_id: str, user_id: str) -> None:
        with self.db.get_connection() as conn:
            conn.execute(
                "DELETE FROM realm_members WHERE realm_id = ? AND user_id = ?",
                (realm_id, user_id),
            )

    def is_member(self, realm_id: str, user_id: str) -> bool:
        with self.db.get_connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM realm_members WHERE realm_id = ? AND user_id = ? LIMIT 1",
                (realm_id, user_id),
            ).fetchone()
        return row is not None

    def get_members(self, realm_id: str) -> list[dict]:
        with self.db.get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM realm_members WHERE realm_id = ? ORDER BY joined_at",
                (realm_id,),
            ).fetchall()
        return [dict(r) for r in rows]

    # -- Users --

    def ensure_user(self, user_id: str) -> None:
        """Create a user row named after its id if none exists."""
        with self.db.get_connection() as conn:
            conn.execute(
                "INSERT INTO users (id, name) VALUES (?, ?) ON CONFLICT(id) DO NOTHING",
                (user_id, user_id),
            )
