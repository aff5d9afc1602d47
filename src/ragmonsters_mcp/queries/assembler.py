"""
Row assembly: folds flat query rows into nested creature records.

Every function here is pure. Grouping uses an explicit multi-map keyed by
keyword name and emits nodes in sorted key order, so the result never
depends on the order rows happened to arrive in.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from ..models import (
    Ability,
    Creature,
    CreatureDetail,
    Ecology,
    Edge,
    Flaw,
    Keyword,
    PhysicalAttributes,
    Powers,
)

Row = Mapping[str, Any]

DEFAULT_ADVANTAGE_MODIFIER = 5
DEFAULT_DISADVANTAGE_MODIFIER = -5


def _powers(row: Row) -> Powers:
    return Powers(
        primary=row.get("primary_power"),
        secondary=row.get("secondary_power"),
        special=row.get("special_ability"),
    )


def assemble_summary(row: Row) -> Creature:
    """Build a creature summary from one list-query row."""
    return Creature(
        id=row["monster_id"],
        name=row["name"],
        category=row.get("category_name"),
        subcategory=row.get("subcategory_name"),
        habitat=row.get("habitat"),
        biome=row.get("biome"),
        rarity=row.get("rarity"),
        powers=_powers(row),
    )


def group_keywords(rows: Iterable[Row]) -> list[Keyword]:
    """Group keyword/ability join rows into keyword nodes.

    Key: keyword name. Each keyword keeps the rating of its first row.
    Rows with a NULL ability (keyword without abilities) still produce the
    keyword node. Keywords come out sorted by name and abilities sorted by
    (name, mastery).
    """
    ratings: dict[str, int] = {}
    abilities: defaultdict[str, list[Ability]] = defaultdict(list)

    for row in rows:
        name = row["keyword_name"]
        ratings.setdefault(name, row["rating"])
        # touch the key so ability-less keywords are kept
        bucket = abilities[name]
        if row.get("ability_name") is not None:
            bucket.append(Ability(name=row["ability_name"], mastery=row.get("mastery_value")))

    return [
        Keyword(
            name=name,
            rating=ratings[name],
            abilities=sorted(abilities[name], key=lambda a: (a.name, a.mastery or "")),
        )
        for name in sorted(abilities)
    ]


def _edges(rows: Iterable[Row], default_modifier: int) -> list[Edge]:
    return [
        Edge(
            target=row["target_name"],
            modifier=row["modifier"] if row.get("modifier") is not None else default_modifier,
        )
        for row in rows
    ]


def assemble_detail(
    base: Row,
    keyword_rows: Iterable[Row],
    flaw_rows: Iterable[Row],
    advantage_rows: Iterable[Row],
    disadvantage_rows: Iterable[Row],
) -> CreatureDetail:
    """Fold the five detail result sets into one nested record.

    Args:
        base: The creature row.
        keyword_rows: Keyword/ability join rows.
        flaw_rows: Flaw rows, already in display order.
        advantage_rows: Augment (strength) rows.
        disadvantage_rows: Hindrance (weakness) rows.

    Returns:
        CreatureDetail with every list field present, empty when no rows.
    """
    height = base.get("height")

    return CreatureDetail(
        id=base["monster_id"],
        name=base["name"],
        category=base.get("category_name"),
        subcategory=base.get("subcategory_name"),
        habitat=base.get("habitat"),
        biome=base.get("biome"),
        rarity=base.get("rarity"),
        powers=_powers(base),
        monster_type=base.get("monster_type"),
        discovery=base.get("discovery"),
        physical_attributes=PhysicalAttributes(
            height=float(height) if height is not None else None,
            weight=base.get("weight"),
            appearance=base.get("appearance"),
        ),
        ecology=Ecology(
            weakness=base.get("weakness"),
            behavior=base.get("behavior_ecology"),
            notable_specimens=base.get("notable_specimens"),
        ),
        keywords=group_keywords(keyword_rows),
        flaws=[Flaw(name=row["flaw_name"], rating=row["rating"]) for row in flaw_rows],
        strengths=_edges(advantage_rows, DEFAULT_ADVANTAGE_MODIFIER),
        weaknesses=_edges(disadvantage_rows, DEFAULT_DISADVANTAGE_MODIFIER),
    )
