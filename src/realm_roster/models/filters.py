from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from realm_roster.models.character import CharacterListItem
from realm_roster.models.trait import MAX_VALUE, MIN_VALUE


class Comparison(str, Enum):
    GTE = "gte"
    LTE = "lte"
    EQ = "eq"
    BETWEEN = "between"


class Classification(str, Enum):
    MATCHED = "matched"
    UNRATED = "unrated"
    EXCLUDED = "excluded"


class TraitFilter(BaseModel):
    """A constraint on one trait, addressed by name rather than id.

    Instances are canonical: the operand lives in ``value`` for the single
    operand comparisons and is mirrored into ``min``/``max`` the way the
    comparison reads it, while ``between`` keeps only ``min``/``max``.
    """

    model_config = ConfigDict(frozen=True)

    trait_name: str = Field(min_length=1)
    comparison: Comparison
    value: Optional[int] = Field(default=None, ge=MIN_VALUE, le=MAX_VALUE)
    min: Optional[int] = Field(default=None, ge=MIN_VALUE, le=MAX_VALUE)
    max: Optional[int] = Field(default=None, ge=MIN_VALUE, le=MAX_VALUE)

    @model_validator(mode="before")
    @classmethod
    def _canonicalize(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        comparison = data.get("comparison")
        if isinstance(comparison, Comparison):
            comparison = comparison.value
        value, lo, hi = data.get("value"), data.get("min"), data.get("max")
        if comparison == "gte":
            operand = value if value is not None else lo
            data.update(value=operand, min=operand, max=None)
        elif comparison == "lte":
            operand = value if value is not None else hi
            data.update(value=operand, min=None, max=operand)
        elif comparison == "eq":
            operand = value if value is not None else lo
            data.update(value=operand, min=operand, max=operand)
        elif comparison == "between":
            data["value"] = None
        return data

    @model_validator(mode="after")
    def _check_operands(self) -> "TraitFilter":
        if self.comparison is Comparison.BETWEEN:
            if self.min is None and self.max is None:
                raise ValueError("between filter needs at least one bound")
            if self.min is not None and self.max is not None and self.min > self.max:
                raise ValueError("between filter has min greater than max")
        elif self.value is None:
            raise ValueError(f"{self.comparison.value} filter needs a value")
        return self

    @property
    def is_any(self) -> bool:
        """True for the full-range ``between`` the UI uses as its default."""
        return (
            self.comparison is Comparison.BETWEEN
            and self.min == MIN_VALUE
            and self.max == MAX_VALUE
        )


class CharacterQuery(BaseModel):
    """Non-trait list filters applied before trait partitioning."""

    search: str = ""
    gender: Optional[str] = None
    creator: Optional[str] = None


class FilterResult(BaseModel):
    matched: list[CharacterListItem] = Field(default_factory=list)
    unrated: list[CharacterListItem] = Field(default_factory=list)
    excluded: list[CharacterListItem] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.matched) + len(self.unrated) + len(self.excluded)
