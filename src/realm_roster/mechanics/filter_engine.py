"""Trait filter evaluation over rating summaries. Pure functions, no I/O.

Trait filters are AND-combined and address traits by display name,
compared case-insensitively. Characters from different realms whose traits
share a name are therefore filtered as if the traits were one; that is a
name heuristic, not an identity.

Every character lands in exactly one of three buckets:

* ``matched``: rated for the filtered traits and satisfies every filter.
* ``unrated``: has no numeric rating for any filtered trait; shown apart.
* ``excluded``: rated for at least one filtered trait but fails the set.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from realm_roster.models.character import CharacterListItem
from realm_roster.models.filters import (
    CharacterQuery,
    Classification,
    Comparison,
    FilterResult,
    TraitFilter,
)
from realm_roster.models.trait import MAX_VALUE, MIN_VALUE, RatingSummaryEntry


def names_match(a: str, b: str) -> bool:
    """Cross-realm trait matching: exact, case-insensitive name equality."""
    return a.lower() == b.lower()


def rating_for(summary: Sequence[RatingSummaryEntry], trait_name: str) -> int | None:
    """Numeric rating the summary holds for ``trait_name``, if any."""
    for entry in summary:
        if names_match(entry.trait_name, trait_name):
            return entry.value if isinstance(entry.value, int) else None
    return None


def matches_operator(trait_filter: TraitFilter, value: int) -> bool:
    """Does a single rating value satisfy one filter?"""
    comparison = trait_filter.comparison
    if comparison is Comparison.GTE:
        return value >= (trait_filter.min if trait_filter.min is not None else MIN_VALUE)
    if comparison is Comparison.LTE:
        return value <= (trait_filter.max if trait_filter.max is not None else MAX_VALUE)
    if comparison is Comparison.EQ:
        return value == trait_filter.value
    if trait_filter.is_any:
        return True
    lo = trait_filter.min if trait_filter.min is not None else MIN_VALUE
    hi = trait_filter.max if trait_filter.max is not None else MAX_VALUE
    return lo <= value <= hi


def classify(summary: Sequence[RatingSummaryEntry], filters: Sequence[TraitFilter]) -> Classification:
    """Place one character's rating summary into a bucket."""
    if not filters:
        return Classification.MATCHED

    values = [rating_for(summary, f.trait_name) for f in filters]
    if all(v is None for v in values):
        return Classification.UNRATED

    # Once ratable, a missing rating for any other filtered trait fails the set.
    for trait_filter, value in zip(filters, values):
        if value is None or not matches_operator(trait_filter, value):
            return Classification.EXCLUDED
    return Classification.MATCHED


def partition(
    characters: Iterable[CharacterListItem], filters: Sequence[TraitFilter],
) -> FilterResult:
    """Classify each character independently, preserving input order."""
    result = FilterResult()
    buckets = {
        Classification.MATCHED: result.matched,
        Classification.UNRATED: result.unrated,
        Classification.EXCLUDED: result.excluded,
    }
    for character in characters:
        buckets[classify(character.ratings_summary, filters)].append(character)
    return result


# -- Non-trait list filters --

def apply_query(
    characters: Iterable[CharacterListItem], query: CharacterQuery,
) -> list[CharacterListItem]:
    """Search, gender and creator filters, then case-insensitive name order."""
    needle = query.search.strip().lower()
    out = []
    for character in characters:
        if needle and needle not in character.name.lower() and needle not in (character.notes or "").lower():
            continue
        if query.gender and character.gender != query.gender:
            continue
        if query.creator and character.user_name != query.creator:
            continue
        out.append(character)
    return sorted(out, key=lambda c: c.name.lower())


def filter_characters(
    characters: Iterable[CharacterListItem],
    filters: Sequence[TraitFilter],
    query: CharacterQuery | None = None,
) -> FilterResult:
    """Full listing pipeline: plain filters first, then the trait partition."""
    return partition(apply_query(characters, query or CharacterQuery()), filters)


# -- Filter vocabulary --

def available_trait_names(characters: Iterable[CharacterListItem]) -> list[str]:
    names = {entry.trait_name for c in characters for entry in c.ratings_summary if entry.trait_name}
    return sorted(names)


def available_traits_to_filter(
    characters: Iterable[CharacterListItem], filters: Sequence[TraitFilter],
) -> list[str]:
    """Trait names not already under a filter."""
    taken = {f.trait_name.lower() for f in filters}
    return [name for name in available_trait_names(characters) if name.lower() not in taken]


def available_genders(characters: Iterable[CharacterListItem]) -> list[str]:
    return sorted({c.gender for c in characters if c.gender})


def available_creators(characters: Iterable[CharacterListItem]) -> list[str]:
    return sorted({c.user_name for c in characters if c.user_name})
