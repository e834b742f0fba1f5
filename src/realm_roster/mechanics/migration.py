"""Rating reconciliation for a character moving between realms. Pure, no I/O.

Traits belong to one realm and have no identity across realms, so ratings
are carried over by trait name (case-insensitive). Applying the plan is the
caller's job and must happen in one transaction.
"""
from __future__ import annotations

import logging
from typing import Iterable

from realm_roster.models.migration import (
    CatalogTrait,
    ExistingRating,
    MigrationPlan,
    RatingCreation,
)

logger = logging.getLogger(__name__)


def trait_name_key(name: str) -> str:
    """Key under which trait names are matched across realms."""
    return name.lower()


def build_trait_lookup(catalog: Iterable[CatalogTrait]) -> dict[str, str]:
    """Map name key -> trait id. On collisions the last trait wins."""
    return {trait_name_key(t.name): t.id for t in catalog}


def plan_migration(
    character_id: str,
    existing: Iterable[ExistingRating],
    target_catalog: Iterable[CatalogTrait],
) -> MigrationPlan:
    """Decide the fate of every rating a character holds.

    Every old rating is deleted. Rated traits whose name exists in the
    target catalog get a replacement rating with the same value; the rest
    are reported in ``unmapped_traits``.
    """
    lookup = build_trait_lookup(target_catalog)
    plan = MigrationPlan(character_id=character_id)
    for rating in existing:
        target_id = lookup.get(trait_name_key(rating.trait_name))
        if rating.value is not None:
            if target_id is not None:
                plan.creations.append(
                    RatingCreation(character_id=character_id, trait_id=target_id, value=rating.value)
                )
            else:
                plan.unmapped_traits.append(rating.trait_name)
        plan.deletions.append(rating.rating_id)

    logger.debug(
        "Migration plan for %s: %d carried, %d unmapped, %d deleted",
        character_id, len(plan.creations), len(plan.unmapped_traits), len(plan.deletions),
    )
    return plan
