"""Exception hierarchy for realm-roster."""
from __future__ import annotations


class RealmRosterError(Exception):
    """Base exception for realm-roster errors."""


# -- Codec --

class InvalidValue(RealmRosterError, ValueError):
    """Raised when a rating value is outside 1..20."""


class InvalidGrade(RealmRosterError, ValueError):
    """Raised when a grade label is not one of the 20 known grades."""


class InvalidRatingValue(RealmRosterError, ValueError):
    """Raised when a rating upsert carries an unusable value."""


class MalformedFilterToken(RealmRosterError, ValueError):
    """Raised by strict filter parsing when a token cannot be read."""


# -- Lookups --

class NotFound(RealmRosterError):
    """Base for missing rows."""


class RealmNotFound(NotFound):
    pass


class CharacterNotFound(NotFound):
    pass


class TraitNotFound(NotFound):
    pass


class RatingNotFound(NotFound):
    pass


# -- Authorization / integrity --

class NotRealmMember(RealmRosterError):
    """Raised when the acting user is not a member of the realm."""


class TargetRealmMembershipRequired(NotRealmMember):
    """Raised when moving a character into a realm the user has not joined."""


class MismatchedRealms(RealmRosterError):
    """Raised when a character and a trait belong to different realms."""


class DuplicateTraitName(RealmRosterError):
    """Raised when a realm already has a trait with the given name."""


class NotRealmOwner(RealmRosterError):
    """Raised when an owner-only realm operation is attempted by someone else."""


class OwnerCannotLeave(RealmRosterError):
    """Raised when a realm owner tries to leave their own realm."""
