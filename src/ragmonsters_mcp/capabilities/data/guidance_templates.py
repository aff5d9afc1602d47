"""
Workflow templates that tell an agent how to sequence the monster Actions.

Each template is fixed text; nothing here executes an Action.
"""

GUIDANCE_TEMPLATES = {
    "analyze_weakness": """Analyze the weaknesses of a monster and suggest counter-strategies.

Follow this workflow:
1. Use getMonsterByName to find the target monster and its ID
2. Use getMonsterById to get full details including weaknesses, flaws and hindrances
3. Identify the monster's key vulnerabilities:
   - Disadvantage edges (targets it is weak against, with their modifiers)
   - Flaws, highest rating first
   - Low-rated keywords
4. Use getMonsters with filters to find potential counter-monsters:
   - Filter by the categories named in the target's weaknesses
   - Consider monsters from opposing categories or habitats
5. Rank the counter-monsters by effectiveness based on:
   - Direct power advantages
   - Resistance to the target's abilities
   - Rarity (more common = more accessible)
6. Provide a battle strategy summary with:
   - Top 3 recommended counter-monsters
   - Key tactics to exploit weaknesses
   - Dangers to avoid (the target's strengths)""",

    "compare": """Compare two monsters in detail to determine advantages and matchup analysis.

Follow this workflow:
1. Use compareMonsters to get a side-by-side basic comparison
2. Use getMonsterById for each monster to get full details including:
   - Complete power sets (primary, secondary, special)
   - Keywords and abilities with ratings
   - Flaws
   - Strengths (advantage edges) and weaknesses (disadvantage edges)
3. Analyze the matchup:
   - Which monster's powers counter the other's weaknesses?
   - Compare keyword ratings and ability masteries
   - Identify asymmetric advantages
4. Consider environmental factors:
   - Habitat advantages (home territory bonus)
   - Biome compatibility
5. Provide a verdict:
   - Overall advantage assessment
   - Situational factors that could flip the matchup
   - Recommended tactics for each side""",

    "explore_habitat": """Explore a habitat and analyze its monster ecosystem.

Follow this workflow:
1. Use getHabitats to list available habitats (or read ragmonsters://habitats)
2. Use getMonsterByHabitat with the exact habitat name to find its monsters
3. For key monsters, use getMonsterById to get detailed information
4. Analyze the ecosystem:
   - Group monsters by rarity (Common to Extremely Rare)
   - Identify the apex predators (highest threat monsters)
   - Map the power hierarchy
   - Note category diversity
5. Provide exploration guidance:
   - Danger assessment for the habitat
   - Most common encounters to expect
   - Rare monsters worth seeking
   - Recommended preparation and counter-strategies""",

    "build_team": """Build an optimal monster team for a specific objective.

Follow this workflow:
1. Clarify the objective:
   - Target habitat or biome to explore?
   - Specific monster to hunt?
   - General purpose balanced team?
2. Use getCategories and getSubcategories to understand available monster types
3. Use getMonsters with appropriate filters to find candidates:
   - Consider category diversity for balanced coverage
   - Match habitat affinity if targeting a specific area
   - Balance rarity (rare monsters are powerful but hard to find)
4. For top candidates, use getMonsterById to evaluate:
   - Power synergies between team members
   - Coverage of each other's weaknesses
   - Complementary abilities
5. Recommend a team composition:
   - Primary team (3-5 monsters)
   - Role for each member (tank, damage, support, specialist)
   - Team synergies and combo strategies
   - Backup alternatives for each role""",

    "disambiguation": """Resolve a monster name the user gave loosely or misspelled.

Follow this workflow:
1. Use getMonsterByName with the shortest distinctive part of the name
2. If found is false, retry with a shorter fragment, then fall back to getMonsters
   with any category, habitat or rarity the user mentioned
3. If exactly one monster matches, continue with its ID
4. If several match (at most 5 are returned), list them with category and habitat
   and ask the user which one they meant
5. Never guess between several matches""",

    "answering_style": """Present monster data to the user.

Guidelines:
- Lead with the summary field returned by the Action, then add detail
- Quote names, ratings and modifiers exactly as returned; never invent stats
- Mention the source of the data when the user asks where it came from
- If a list was limited (policy.limitAdjusted), say that more results exist
- If a sort field was replaced (policy.sortFallback), say which order was used
- On a not_found error, suggest the disambiguation workflow
- On an upstream_unavailable or timeout error, say the data is temporarily unavailable""",
}

GUIDANCE_DESCRIPTIONS = {
    "analyze_weakness": "Structured workflow to analyze a monster's weaknesses and find counter-strategies",
    "compare": "Comparison framework for analyzing the matchup between two monsters",
    "explore_habitat": "Ecosystem analysis workflow for a habitat and its monster population",
    "build_team": "Team composition workflow for building an optimal monster team",
    "disambiguation": "How to resolve an ambiguous or misspelled monster name",
    "answering_style": "How to present monster data and errors to the user",
}
