"""
Static reference documents served as Knowledge.
"""

SCHEMA_DESCRIPTION = """# RAGmonsters Dataset Schema

Monster {
  id: Integer (primary key)
  name: String (not guaranteed unique; use getMonsterByName to disambiguate)
  category: String (one of ragmonsters://categories)
  subcategory: String (belongs to exactly one category)
  monster_type: String
  habitat: String (see ragmonsters://habitats)
  biome: String (see ragmonsters://biomes)
  rarity: Enum(Common, Uncommon, Rare, Very Rare, Extremely Rare)
  discovery: Text (discovery story)
  height: Decimal (metres)
  weight: String
  appearance: Text
  primary_power, secondary_power, special_ability: String
  weakness, behavior_ecology, notable_specimens: Text
}

Category {category_name} 1 --- * Subcategory {subcategory_name} 1 --- * Monster

QuestWorlds stats (one block per monster) {
  Keywords: name + rating, each owning zero or more
    Abilities: name + mastery value
  Flaws: name + rating
  Strengths (augments): target + modifier, positive (default +5)
  Weaknesses (hindrances): target + modifier, negative (default -5)
}

All data is read-only. Deleting a monster removes its stats, keywords,
abilities, flaws and edges with it."""

QUERY_TIPS = """# Querying RAGmonsters

- Discover valid values first: getCategories, getRarities, getHabitats, getBiomes
  (or the matching ragmonsters:// resources). Habitat and biome filters are exact,
  case-sensitive matches; category and rarity must be one of the listed values.
- getMonsters returns summaries; call getMonsterById for keywords, abilities,
  flaws, strengths and weaknesses.
- Page sizes are clamped to 1-50 (default 10). Use the offset from the "next" hint
  to fetch the following page; ordering always ends with the monster ID, so pages
  are stable across repeated calls.
- Allowed sort fields: name, category, habitat, rarity. Anything else sorts by name
  and is reported in policy.sortFallback.
- getMonsterByName does a case-insensitive partial match and returns at most 5
  monsters; ask the user to choose when several come back.
- compareMonsters takes two names and reports which attributes match."""

IMAGE_PLACEHOLDER_SVG = """<svg xmlns="http://www.w3.org/2000/svg" width="256" height="256" viewBox="0 0 256 256">
  <rect width="256" height="256" fill="#1f2937"/>
  <circle cx="128" cy="108" r="56" fill="#4b5563"/>
  <text x="128" y="204" font-family="sans-serif" font-size="20" fill="#e5e7eb" text-anchor="middle">Monster #{monster_id}</text>
</svg>"""
