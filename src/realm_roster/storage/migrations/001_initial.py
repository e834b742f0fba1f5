"""Migration 001: realms, members, characters, traits and ratings."""
from __future__ import annotations

import sqlite3

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS realms (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    owner_id    TEXT NOT NULL,
    created_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS realm_members (
    id          TEXT PRIMARY KEY,
    realm_id    TEXT NOT NULL REFERENCES realms(id) ON DELETE CASCADE,
    user_id     TEXT NOT NULL,
    role        TEXT NOT NULL DEFAULT 'member',
    joined_at   TEXT NOT NULL,
    UNIQUE(realm_id, user_id)
);

CREATE TABLE IF NOT EXISTS characters (
    id          TEXT PRIMARY KEY,
    realm_id    TEXT NOT NULL REFERENCES realms(id) ON DELETE CASCADE,
    user_id     TEXT NOT NULL,
    name        TEXT NOT NULL,
    gender      TEXT,
    notes       TEXT,
    created_at  TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS traits (
    id            TEXT PRIMARY KEY,
    realm_id      TEXT NOT NULL REFERENCES realms(id) ON DELETE CASCADE,
    name          TEXT NOT NULL,
    description   TEXT,
    display_mode  TEXT NOT NULL DEFAULT 'grade'
                  CHECK (display_mode IN ('number', 'grade')),
    created_by    TEXT,
    created_at    TEXT NOT NULL,
    UNIQUE(realm_id, name)
);

CREATE TABLE IF NOT EXISTS character_trait_ratings (
    id            TEXT PRIMARY KEY,
    character_id  TEXT NOT NULL REFERENCES characters(id) ON DELETE CASCADE,
    trait_id      TEXT NOT NULL REFERENCES traits(id) ON DELETE CASCADE,
    value         INTEGER NOT NULL CHECK (value BETWEEN 1 AND 20),
    created_at    TEXT NOT NULL,
    updated_at    TEXT NOT NULL,
    UNIQUE(character_id, trait_id)
);

CREATE INDEX IF NOT EXISTS idx_realm_members_user ON realm_members(user_id);
CREATE INDEX IF NOT EXISTS idx_characters_realm ON characters(realm_id);
CREATE INDEX IF NOT EXISTS idx_traits_realm ON traits(realm_id);
CREATE INDEX IF NOT EXISTS idx_ratings_character ON character_trait_ratings(character_id);
CREATE INDEX IF NOT EXISTS idx_ratings_trait ON character_trait_ratings(trait_id);
"""


def upgrade(conn: sqlite3.Connection) -> None:
    conn.executescript(_SCHEMA_SQL)
