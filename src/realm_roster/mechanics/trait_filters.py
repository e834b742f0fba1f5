"""Trait filter tokens and their query-string encoding.

A filter travels in a URL as one parameter per trait::

    trait.<slug>=gte.12
    trait.<slug>=between.5.15
    trait.<slug>=5-15        (legacy, input only)
    trait.<slug>=12          (legacy, input only, read as eq.12)

Parsing is total: anything unreadable yields ``None`` and the filter is
dropped, so one bad parameter never breaks a listing.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping
from urllib.parse import parse_qsl, urlencode

from pydantic import ValidationError

from realm_roster.errors import MalformedFilterToken
from realm_roster.models.filters import Comparison, TraitFilter

logger = logging.getLogger(__name__)

TRAIT_PARAM_PREFIX = "trait."
DEFAULT_THRESHOLD = 10

_NUMBER = r"\d{1,3}"
_OPERATOR_RE = re.compile(rf"^(gte|lte|eq)\.({_NUMBER})$")
_BETWEEN_RE = re.compile(rf"^between\.({_NUMBER})?\.({_NUMBER})?$")
_LEGACY_RANGE_RE = re.compile(rf"^({_NUMBER})?-({_NUMBER})?$")
_BARE_RE = re.compile(rf"^({_NUMBER})$")

_COMPARISON_LABELS = {
    Comparison.GTE: "At least",
    Comparison.LTE: "At most",
    Comparison.EQ: "Exactly",
    Comparison.BETWEEN: "Between",
}


def _int_or_none(raw: str | None) -> int | None:
    return int(raw) if raw else None


def _fields_for_token(token: str) -> dict | None:
    m = _OPERATOR_RE.match(token)
    if m:
        return {"comparison": m.group(1), "value": int(m.group(2))}
    m = _BETWEEN_RE.match(token) or _LEGACY_RANGE_RE.match(token)
    if m:
        return {
            "comparison": "between",
            "min": _int_or_none(m.group(1)),
            "max": _int_or_none(m.group(2)),
        }
    m = _BARE_RE.match(token)
    if m:
        return {"comparison": "eq", "value": int(m.group(1))}
    return None


def parse_token(trait_name: str, token: str) -> TraitFilter | None:
    """Parse one filter token for ``trait_name``; ``None`` if unusable."""
    try:
        return parse_token_strict(trait_name, token)
    except MalformedFilterToken as exc:
        logger.debug("Dropping trait filter: %s", exc)
        return None


def parse_token_strict(trait_name: str, token: str) -> TraitFilter:
    """Like :func:`parse_token` but raises :class:`MalformedFilterToken`."""
    if not isinstance(token, str):
        raise MalformedFilterToken(f"{trait_name}: token is not a string")
    fields = _fields_for_token(token.strip())
    if fields is None:
        raise MalformedFilterToken(f"{trait_name}: unreadable token {token!r}")
    try:
        return TraitFilter(trait_name=trait_name.strip(), **fields)
    except ValidationError as exc:
        raise MalformedFilterToken(f"{trait_name}: {token!r} ({exc.error_count()} errors)") from exc


def serialize_filter(trait_filter: TraitFilter) -> str:
    """Render a filter as its operator-form token."""
    if trait_filter.comparison is Comparison.BETWEEN:
        lo = "" if trait_filter.min is None else trait_filter.min
        hi = "" if trait_filter.max is None else trait_filter.max
        return f"between.{lo}.{hi}"
    return f"{trait_filter.comparison.value}.{trait_filter.value}"


def comparison_label(comparison: Comparison | str) -> str:
    return _COMPARISON_LABELS[Comparison(comparison)]


# -- Trait names in parameter keys --

def trait_name_to_slug(trait_name: str) -> str:
    """Lowercase and collapse whitespace runs to dashes: "Quick Wit" -> "quick-wit"."""
    return re.sub(r"\s+", "-", trait_name.strip().lower())


def slug_to_trait_name(slug: str) -> str:
    """Inverse-ish of :func:`trait_name_to_slug`; casing is lost, words are capitalised."""
    return " ".join(word[:1].upper() + word[1:] for word in re.split(r"[-\s]+", slug) if word)


def param_key(trait_name: str) -> str:
    return f"{TRAIT_PARAM_PREFIX}{trait_name_to_slug(trait_name)}"


# -- Whole query strings --

def _pairs(params: Mapping[str, str] | Iterable[tuple[str, str]]) -> Iterable[tuple[str, str]]:
    if isinstance(params, Mapping):
        return params.items()
    return params


def parse_trait_filters(params: Mapping[str, str] | Iterable[tuple[str, str]]) -> list[TraitFilter]:
    """Collect every readable ``trait.*`` parameter into filters.

    Names are compared case-insensitively, so a later parameter for the same
    trait replaces an earlier one.
    """
    by_name: dict[str, TraitFilter] = {}
    for key, token in _pairs(params):
        if not key.startswith(TRAIT_PARAM_PREFIX):
            continue
        trait_name = slug_to_trait_name(key[len(TRAIT_PARAM_PREFIX):])
        if not trait_name:
            continue
        parsed = parse_token(trait_name, token)
        if parsed is not None:
            by_name[parsed.trait_name.lower()] = parsed
    return list(by_name.values())


def parse_query_string(query: str) -> list[TraitFilter]:
    return parse_trait_filters(parse_qsl(query.lstrip("?"), keep_blank_values=True))


def encode_trait_filters(filters: Iterable[TraitFilter]) -> dict[str, str]:
    return {param_key(f.trait_name): serialize_filter(f) for f in filters}


def build_query_string(params: Mapping[str, str]) -> str:
    return urlencode(dict(params))


# -- Editing filter state held in query parameters --

def add_trait_filter(
    params: Mapping[str, str], trait_name: str, threshold: int = DEFAULT_THRESHOLD,
) -> dict[str, str]:
    """Add an "at least ``threshold``" filter for a trait."""
    return set_trait_filter(
        params, TraitFilter(trait_name=trait_name, comparison=Comparison.GTE, value=threshold),
    )


def set_trait_filter(params: Mapping[str, str], trait_filter: TraitFilter) -> dict[str, str]:
    out = dict(params)
    out[param_key(trait_filter.trait_name)] = serialize_filter(trait_filter)
    return out


def remove_trait_filter(params: Mapping[str, str], trait_name: str) -> dict[str, str]:
    out = dict(params)
    out.pop(param_key(trait_name), None)
    return out


def clear_trait_filters(params: Mapping[str, str]) -> dict[str, str]:
    """Drop every trait filter, keeping unrelated parameters."""
    return {k: v for k, v in params.items() if not k.startswith(TRAIT_PARAM_PREFIX)}
