"""Grade codec: 1..20 rating values <-> letter grades. Pure functions, no I/O."""
from __future__ import annotations

from realm_roster.errors import InvalidGrade, InvalidRatingValue, InvalidValue
from realm_roster.models.trait import MAX_VALUE, MIN_VALUE, DisplayMode

TRAIT_GRADES: tuple[str, ...] = (
    "F", "E-", "E", "E+",
    "D-", "D", "D+",
    "C-", "C", "C+",
    "B-", "B", "B+",
    "A-", "A", "A+",
    "S-", "S", "S+",
    "Z",
)

_GRADE_INDEX = {grade: i for i, grade in enumerate(TRAIT_GRADES)}


def value_to_grade(value: int) -> str:
    """Return the grade label for a rating value. No clamping."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidValue(f"Rating value must be an integer, got {value!r}")
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise InvalidValue(f"Rating value must be between {MIN_VALUE} and {MAX_VALUE}, got {value}")
    return TRAIT_GRADES[value - 1]


def grade_to_value(grade: str) -> int:
    """Return the rating value for a grade label."""
    try:
        return _GRADE_INDEX[grade] + 1
    except (KeyError, TypeError):
        raise InvalidGrade(f"Unknown grade: {grade!r}") from None


def is_grade(label: object) -> bool:
    return isinstance(label, str) and label in _GRADE_INDEX


def normalize_rating_value(value: int | str) -> int:
    """Turn an incoming rating (number or grade label) into the stored integer.

    Numeric strings are accepted so values typed on a command line work the
    same as JSON numbers.
    """
    if isinstance(value, str):
        if is_grade(value):
            return grade_to_value(value)
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidRatingValue(f"Invalid rating value: {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRatingValue(f"Invalid rating value: {value!r}")
    if not MIN_VALUE <= value <= MAX_VALUE:
        raise InvalidRatingValue(f"Invalid rating value: {value}")
    return value


def format_rating(value: int | None, display_mode: DisplayMode | str = DisplayMode.NUMBER) -> str:
    """Render a stored rating the way its trait asks to be displayed."""
    if value is None:
        return "-"
    if DisplayMode(display_mode) is DisplayMode.GRADE:
        return value_to_grade(value)
    return str(value)


def score_options() -> list[tuple[int, str]]:
    """(value, "value (grade)") pairs for every rating value, lowest first."""
    return [(v, f"{v} ({value_to_grade(v)})") for v in range(MIN_VALUE, MAX_VALUE + 1)]
