"""
Domain and argument models for RAGmonsters MCP.

Domain models describe the nested creature records handed back to callers
(camelCase on the wire). Argument models describe what each Action accepts;
their validators delegate to the guardrail layer so bad rarities and bad
pagination fail before any statement is built. Categories are checked by the
Actions against the reference cache, also before any statement is built.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .core.errors import ValidationError
from .core.guardrails import require_non_negative_int, validate_rarity

# =============================================================================
# Domain records
# =============================================================================


class DomainModel(BaseModel):
    """Base class for records returned to callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_payload(self) -> dict[str, Any]:
        """Dump as a JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class Powers(DomainModel):
    primary: str | None = None
    secondary: str | None = None
    special: str | None = None


class Creature(DomainModel):
    """Summary shape returned by every list-style Action."""

    id: int
    name: str
    category: str | None = None
    subcategory: str | None = None
    habitat: str | None = None
    biome: str | None = None
    rarity: str | None = None
    powers: Powers = Field(default_factory=Powers)


class PhysicalAttributes(DomainModel):
    height: float | None = None
    weight: str | None = None
    appearance: str | None = None


class Ecology(DomainModel):
    weakness: str | None = None
    behavior: str | None = None
    notable_specimens: str | None = None


class Ability(DomainModel):
    name: str
    mastery: str | None = None


class Keyword(DomainModel):
    name: str
    rating: int
    abilities: list[Ability] = Field(default_factory=list)


class Flaw(DomainModel):
    name: str
    rating: int


class Edge(DomainModel):
    """A typed advantage/disadvantage relationship to a target."""

    target: str
    modifier: int


class CreatureDetail(Creature):
    """Full nested record for a single creature."""

    monster_type: str | None = None
    discovery: str | None = None
    physical_attributes: PhysicalAttributes = Field(default_factory=PhysicalAttributes)
    ecology: Ecology = Field(default_factory=Ecology)
    keywords: list[Keyword] = Field(default_factory=list)
    flaws: list[Flaw] = Field(default_factory=list)
    strengths: list[Edge] = Field(default_factory=list)
    weaknesses: list[Edge] = Field(default_factory=list)


# =============================================================================
# Action arguments
# =============================================================================


class ArgumentModel(BaseModel):
    """Base class for Action argument schemas."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


def _required_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field}' must be a non-empty string", field=field)
    return value.strip()


def _optional_text(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _optional_name(value: Any, field: str) -> str | None:
    value = _optional_text(value)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"'{field}' must be a string", field=field)
    return value


class MonsterFilters(ArgumentModel):
    category: str | None = Field(default=None, description="Monster category (see getCategories)")
    habitat: str | None = Field(default=None, description="Exact habitat name")
    biome: str | None = Field(default=None, description="Exact biome name")
    rarity: str | None = Field(default=None, description="Monster rarity (closed set)")

    @field_validator("category", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> Any:
        return _optional_name(value, "category")

    @field_validator("rarity", mode="before")
    @classmethod
    def _check_rarity(cls, value: Any) -> Any:
        return None if value is None else validate_rarity(value)

    @field_validator("habitat", "biome", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> Any:
        return _optional_text(value)


class SortSpec(BaseModel):
    """Sort request; unknown fields are resolved leniently by the guardrails."""

    model_config = ConfigDict(extra="ignore")

    field: str | None = Field(default=None, description="name, category, habitat or rarity")
    direction: str | None = Field(default=None, description="asc (default) or desc")


class GetMonstersArgs(ArgumentModel):
    filters: MonsterFilters = Field(default_factory=MonsterFilters)
    sort: SortSpec | None = None
    limit: int | None = Field(default=None, description="Page size, clamped to 1-50")
    offset: int = Field(default=0, description="Rows to skip for pagination")

    @field_validator("filters", mode="before")
    @classmethod
    def _default_filters(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("limit", mode="before")
    @classmethod
    def _check_limit(cls, value: Any) -> Any:
        return None if value is None else require_non_negative_int(value, "limit")

    @field_validator("offset", mode="before")
    @classmethod
    def _check_offset(cls, value: Any) -> Any:
        return 0 if value is None else require_non_negative_int(value, "offset")


class GetMonsterByIdArgs(ArgumentModel):
    monster_id: int = Field(alias="monsterId", description="Monster identity")

    @field_validator("monster_id", mode="before")
    @classmethod
    def _check_id(cls, value: Any) -> Any:
        return require_non_negative_int(value, "monsterId")


class GetMonsterByNameArgs(ArgumentModel):
    name: str = Field(description="Full or partial monster name (case-insensitive)")

    @field_validator("name", mode="before")
    @classmethod
    def _check_name(cls, value: Any) -> Any:
        return _required_text(value, "name")


class GetMonsterByHabitatArgs(ArgumentModel):
    habitat: str = Field(description="Exact habitat name")
    limit: int | None = Field(default=None, description="Page size, clamped to 1-50")

    @field_validator("habitat", mode="before")
    @classmethod
    def _check_habitat(cls, value: Any) -> Any:
        return _required_text(value, "habitat")

    @field_validator("limit", mode="before")
    @classmethod
    def _check_limit(cls, value: Any) -> Any:
        return None if value is None else require_non_negative_int(value, "limit")


class CompareMonstersArgs(ArgumentModel):
    monster_name_a: str = Field(alias="monsterNameA", description="First monster name")
    monster_name_b: str = Field(alias="monsterNameB", description="Second monster name")

    @field_validator("monster_name_a", mode="before")
    @classmethod
    def _check_a(cls, value: Any) -> Any:
        return _required_text(value, "monsterNameA")

    @field_validator("monster_name_b", mode="before")
    @classmethod
    def _check_b(cls, value: Any) -> Any:
        return _required_text(value, "monsterNameB")


class GetSubcategoriesArgs(ArgumentModel):
    category_name: str | None = Field(
        default=None, alias="categoryName", description="Restrict to one category"
    )

    @field_validator("category_name", mode="before")
    @classmethod
    def _check_category(cls, value: Any) -> Any:
        return _optional_name(value, "categoryName")


class NoArgs(ArgumentModel):
    """Arguments for Actions that take none."""
