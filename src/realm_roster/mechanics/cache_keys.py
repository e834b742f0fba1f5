"""Hierarchical cache keys and the keys each mutation invalidates.

Keys are tuples shaped ``(resource, action, *params)``. A key invalidates
every cached entry it is a prefix of, so ``("character",)`` covers all
character reads.
"""
from __future__ import annotations

from typing import Iterable

CacheKey = tuple[str, ...]


# -- Key factory --

def realm_list() -> CacheKey:
    return ("realm", "list")


def realm_by_id(realm_id: str) -> CacheKey:
    return ("realm", "byId", realm_id)


def realm_members(realm_id: str) -> CacheKey:
    return ("realm", "members", realm_id)


def character_list(realm_id: str) -> CacheKey:
    return ("character", "list", realm_id)


def character_by_id(character_id: str) -> CacheKey:
    return ("character", "byId", character_id)


def character_with_ratings(character_id: str) -> CacheKey:
    return ("character", "withRatings", character_id)


def trait_list(realm_id: str) -> CacheKey:
    return ("trait", "list", realm_id)


def trait_by_id(trait_id: str) -> CacheKey:
    return ("trait", "byId", trait_id)


def rating_by_pair(character_id: str, trait_id: str) -> CacheKey:
    return ("rating", "byPair", character_id, trait_id)


def rating_by_character(character_id: str) -> CacheKey:
    return ("rating", "byCharacter", character_id)


def covers(prefix: CacheKey, key: CacheKey) -> bool:
    """True if invalidating ``prefix`` invalidates ``key``."""
    return key[:len(prefix)] == prefix


def _dedupe(keys: Iterable[CacheKey]) -> list[CacheKey]:
    seen: dict[CacheKey, None] = {}
    for key in keys:
        seen.setdefault(key, None)
    return list(seen)


# -- Per-mutation invalidation sets --

def for_character_update(character_id: str, old_realm_id: str, new_realm_id: str | None = None) -> list[CacheKey]:
    """Keys touched by a character update; a realm move touches both realms."""
    keys = [
        character_by_id(character_id),
        character_with_ratings(character_id),
        character_list(old_realm_id),
    ]
    if new_realm_id and new_realm_id != old_realm_id:
        keys += [
            character_list(new_realm_id),
            rating_by_character(character_id),
            ("rating", "byPair", character_id),
        ]
    return _dedupe(keys)


def for_character_create(realm_id: str) -> list[CacheKey]:
    return [character_list(realm_id)]


def for_realm_create() -> list[CacheKey]:
    return [realm_list()]


def for_realm_membership(realm_id: str) -> list[CacheKey]:
    """Joining or leaving changes the member list and the user's realm list."""
    return [realm_list(), realm_members(realm_id)]


def for_realm_delete(realm_id: str) -> list[CacheKey]:
    """Deleting a realm cascades to its characters, traits and ratings."""
    return [
        realm_by_id(realm_id),
        realm_list(),
        realm_members(realm_id),
        character_list(realm_id),
        trait_list(realm_id),
        ("character", "byId"),
        ("character", "withRatings"),
        ("rating",),
    ]


def for_trait_create(realm_id: str) -> list[CacheKey]:
    """A new trait adds an unrated entry to every summary in the realm."""
    return [trait_list(realm_id), character_list(realm_id), ("character", "withRatings")]


def for_character_delete(character_id: str, realm_id: str) -> list[CacheKey]:
    return [
        character_by_id(character_id),
        character_with_ratings(character_id),
        character_list(realm_id),
        rating_by_character(character_id),
        ("rating", "byPair", character_id),
    ]


def for_rating_upsert(character_id: str, trait_id: str, realm_id: str) -> list[CacheKey]:
    return [
        rating_by_pair(character_id, trait_id),
        rating_by_character(character_id),
        character_with_ratings(character_id),
        character_list(realm_id),
    ]


def for_rating_delete(character_id: str, trait_id: str, realm_id: str) -> list[CacheKey]:
    return for_rating_upsert(character_id, trait_id, realm_id)


def for_trait_change(trait_id: str, realm_id: str) -> list[CacheKey]:
    """Trait edits and deletes change every summary in the realm."""
    return [
        trait_by_id(trait_id),
        trait_list(realm_id),
        character_list(realm_id),
        ("character", "withRatings"),
        ("rating",),
    ]
