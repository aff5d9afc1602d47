"""
Guardrails for RAGmonsters MCP.

Input bounds enforced at the capability boundary: the closed rarity
enumeration, category matching against the categories loaded at start-up,
page-size clamping, bounded non-negative pagination values, the sort-field
allow-list and identifier sanitisation.
"""

import re
from collections.abc import Sequence
from typing import Any, NamedTuple

from .errors import ValidationError

# Ordered from most to least common; the order doubles as the sort rank.
RARITIES: tuple[str, ...] = (
    "Common",
    "Uncommon",
    "Rare",
    "Very Rare",
    "Extremely Rare",
)

# Public sort field -> SQL expression (all aliases from the list statement)
SORT_FIELDS: dict[str, str] = {
    "name": "m.name",
    "category": "c.category_name",
    "habitat": "m.habitat",
    "rarity": "rarity_rank",
}

DEFAULT_SORT_FIELD = "name"
DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50
NAME_MATCH_CAP = 5

# LIMIT and OFFSET are bound as PostgreSQL bigint
MAX_BIGINT = 2**63 - 1

_RARITY_LOOKUP = {r.lower(): r for r in RARITIES}


class PageWindow(NamedTuple):
    """A guardrail-approved pagination window."""

    limit: int
    offset: int
    requested_limit: int | None
    adjusted: bool


class SortPlan(NamedTuple):
    """A resolved ordering request."""

    field: str
    expression: str
    descending: bool
    fell_back: bool
    requested_field: str | None

    @property
    def direction(self) -> str:
        return "desc" if self.descending else "asc"


def _validate_enum(
    value: Any, lookup: dict[str, str], allowed: tuple[str, ...], field: str
) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"'{field}' must be one of: {', '.join(allowed)}", field=field
        )
    canonical = lookup.get(value.strip().lower())
    if canonical is None:
        raise ValidationError(
            f"Unknown {field} '{value}'. Allowed values: {', '.join(allowed)}",
            field=field,
        )
    return canonical


def validate_rarity(value: Any) -> str:
    """Validate a rarity against the closed set.

    Args:
        value: Rarity supplied by the caller (case-insensitive).

    Returns:
        The canonical spelling of the rarity.

    Raises:
        ValidationError: If the value is not a known rarity.
    """
    return _validate_enum(value, _RARITY_LOOKUP, RARITIES, "rarity")


def validate_category(value: Any, allowed: Sequence[str], field: str = "category") -> str:
    """Validate a category against the categories present in the dataset.

    Args:
        value: Category supplied by the caller (case-insensitive).
        allowed: Category names loaded by the reference cache.
        field: Argument name reported on failure.

    Returns:
        The canonical spelling of the category.

    Raises:
        ValidationError: If the value is not a known category.
    """
    lookup = {c.lower(): c for c in allowed}
    return _validate_enum(value, lookup, tuple(allowed), field)


def require_non_negative_int(value: Any, field: str) -> int:
    """Coerce a pagination value to a non-negative integer.

    Accepts ints, integral floats and numeric strings. Booleans are rejected
    even though Python treats them as ints.

    Raises:
        ValidationError: If the value is non-numeric, fractional, negative or
            larger than a PostgreSQL bigint.
    """
    if isinstance(value, bool):
        raise ValidationError(f"'{field}' must be an integer, got a boolean", field=field)

    if isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        number = int(value)
    else:
        raise ValidationError(
            f"'{field}' must be a non-negative integer, got {value!r}", field=field
        )

    if number < 0:
        raise ValidationError(
            f"'{field}' must be a non-negative integer, got {number}", field=field
        )
    if number > MAX_BIGINT:
        raise ValidationError(
            f"'{field}' must not exceed {MAX_BIGINT}, got {number}", field=field
        )
    return number


def clamp_limit(
    requested: int | None, offset: int = 0, default: int = DEFAULT_LIMIT
) -> PageWindow:
    """Clamp a requested page size to [MIN_LIMIT, MAX_LIMIT].

    Args:
        requested: Validated limit from the caller, or None for the default.
        offset: Validated offset.
        default: Page size used when none was requested.

    Returns:
        PageWindow with the applied limit and whether it was adjusted.
    """
    if requested is None:
        return PageWindow(default, offset, None, False)
    applied = max(MIN_LIMIT, min(requested, MAX_LIMIT))
    return PageWindow(applied, offset, requested, applied != requested)


def resolve_sort(field: str | None, direction: str | None) -> SortPlan:
    """Resolve a sort request against the allow-list.

    Unknown fields fall back to name instead of failing, so agent-driven
    calls survive small mistakes; the fallback is reported in the plan.
    Any direction other than "desc" sorts ascending.
    """
    key = (field or DEFAULT_SORT_FIELD).strip().lower()
    fell_back = key not in SORT_FIELDS
    if fell_back:
        key = DEFAULT_SORT_FIELD
    descending = (direction or "asc").strip().lower() == "desc"
    return SortPlan(key, SORT_FIELDS[key], descending, fell_back, field)


def rarity_rank_case(column: str = "m.rarity") -> str:
    """Build a CASE expression ranking rarities from common to rare.

    Only the closed rarity constants are written into the SQL text.
    """
    whens = " ".join(
        f"WHEN '{rarity}' THEN {rank}" for rank, rarity in enumerate(RARITIES, start=1)
    )
    return f"CASE {column} {whens} ELSE {len(RARITIES) + 1} END"


def sanitize_identifier(identifier: str) -> str:
    """Sanitize a SQL identifier (schema name).

    Args:
        identifier: The identifier to sanitize.

    Returns:
        Sanitized identifier safe for use in queries.

    Raises:
        ValueError: If identifier contains invalid characters.
    """
    if not identifier:
        raise ValueError("Identifier cannot be empty")

    if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", identifier):
        raise ValueError(f"Invalid identifier: {identifier}")

    return identifier
