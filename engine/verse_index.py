"""
verse_index.py -- Emotion category taxonomy and verse tables.

Holds the ten categories that carry their own verses, the five references
chosen for each (most relevant first), the fallback list used when nothing
matches, and the aliases that fold the wider emotion vocabulary onto the
ten table categories. All tables are read-only and validated at import.
"""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from engine.models import EmotionCategory

logger = logging.getLogger(__name__)

VERSES_PER_CATEGORY: int = 5

# -- Verse table --------------------------------------------------------------
# Declaration order is the tie-break priority used by the classifier.

VERSE_CATEGORIES: Mapping[EmotionCategory, tuple[str, ...]] = MappingProxyType({
    EmotionCategory.ANXIETY: (
        "PHP.4.6-PHP.4.7",    # Be anxious for nothing
        "MAT.6.25-MAT.6.26",  # Do not worry about tomorrow
        "ISA.41.10",          # Fear not, for I am with you
        "PSA.55.22",          # Cast your burden on the Lord
        "1PE.5.7",            # Cast all your anxiety on him
    ),
    EmotionCategory.FEAR: (
        "ISA.41.10",
        "JOS.1.9",            # Be strong and courageous
        "PSA.27.1",           # The Lord is my light
        "2TI.1.7",            # Not a spirit of fear
        "DEU.31.6",
    ),
    EmotionCategory.SADNESS: (
        "PSA.34.18",          # Close to the brokenhearted
        "MAT.5.4",            # Blessed are those who mourn
        "REV.21.4",           # He will wipe every tear
        "PSA.147.3",          # He heals the brokenhearted
        "JHN.16.22",
    ),
    EmotionCategory.ANGER: (
        "EPH.4.26-EPH.4.27",  # Be angry and do not sin
        "PRO.15.1",           # A soft answer turns away wrath
        "JAM.1.19-JAM.1.20",  # Slow to speak, slow to anger
        "COL.3.8",
        "PSA.37.8",
    ),
    EmotionCategory.LONELINESS: (
        "HEB.13.5",           # I will never leave you
        "PSA.68.6",           # God sets the lonely in families
        "ISA.41.10",
        "MAT.28.20",          # I am with you always
        "DEU.31.8",
    ),
    EmotionCategory.GUILT: (
        "1JN.1.9",            # If we confess our sins
        "PSA.103.12",         # As far as the east is from the west
        "ROM.8.1",            # No condemnation
        "ISA.43.25",
        "MIC.7.19",
    ),
    EmotionCategory.HOPE: (
        "JER.29.11",          # Plans to prosper you
        "ROM.15.13",          # May the God of hope fill you
        "LAM.3.22-LAM.3.23",  # His mercies are new every morning
        "PSA.42.11",
        "HEB.11.1",
    ),
    EmotionCategory.STRENGTH: (
        "PHP.4.13",           # I can do all things
        "ISA.40.31",          # Mount up with wings like eagles
        "EPH.6.10",
        "2CO.12.9",           # My grace is sufficient
        "PSA.28.7",
    ),
    EmotionCategory.GUIDANCE: (
        "PRO.3.5-PRO.3.6",    # Trust in the Lord with all your heart
        "PSA.119.105",        # Your word is a lamp
        "ISA.30.21",          # This is the way, walk in it
        "JHN.16.13",
        "PSA.25.9",
    ),
    EmotionCategory.PEACE: (
        "JHN.14.27",          # Peace I leave with you
        "PHP.4.7",
        "ISA.26.3",           # Perfect peace
        "ROM.5.1",
        "COL.3.15",
    ),
})

CATEGORY_PRIORITY: tuple[EmotionCategory, ...] = tuple(VERSE_CATEGORIES)

FALLBACK_VERSES: tuple[str, ...] = (
    "PSA.23.1-PSA.23.6",      # The Lord is my shepherd
    "JHN.3.16",
    "PHP.4.13",
    "ROM.8.28",
    "JER.29.11",
    "ISA.41.10",
    "MAT.11.28-MAT.11.30",    # Come unto me
    "PHP.4.6-PHP.4.7",
    "PSA.46.1",
    "PRO.3.5-PRO.3.6",
)

CATEGORY_INFO: Mapping[EmotionCategory, dict[str, str]] = MappingProxyType({
    EmotionCategory.ANXIETY: {
        "label": "Anxiety",
        "description": "When someone is anxious or worried.",
    },
    EmotionCategory.FEAR: {
        "label": "Fear",
        "description": "When someone is afraid or scared.",
    },
    EmotionCategory.SADNESS: {
        "label": "Sadness",
        "description": "When someone is sad, grieving or depressed.",
    },
    EmotionCategory.ANGER: {
        "label": "Anger",
        "description": "When someone is angry or frustrated.",
    },
    EmotionCategory.LONELINESS: {
        "label": "Loneliness",
        "description": "When someone feels lonely or isolated.",
    },
    EmotionCategory.GUILT: {
        "label": "Guilt",
        "description": "When someone feels guilty or ashamed.",
    },
    EmotionCategory.HOPE: {
        "label": "Hope",
        "description": "When someone needs hope.",
    },
    EmotionCategory.STRENGTH: {
        "label": "Strength",
        "description": "When someone needs strength or courage.",
    },
    EmotionCategory.GUIDANCE: {
        "label": "Guidance",
        "description": "When someone needs direction or guidance.",
    },
    EmotionCategory.PEACE: {
        "label": "Peace",
        "description": "When someone needs peace or calm.",
    },
})

# Wider vocabulary folded onto the table. Categories absent from both the
# table and this map (gratitude, joy, love, compassion) take the fallback path.
CATEGORY_ALIASES: Mapping[EmotionCategory, EmotionCategory] = MappingProxyType({
    EmotionCategory.WORRY: EmotionCategory.ANXIETY,
    EmotionCategory.GRIEF: EmotionCategory.SADNESS,
    EmotionCategory.DEPRESSION: EmotionCategory.SADNESS,
    EmotionCategory.COMFORT: EmotionCategory.SADNESS,
    EmotionCategory.HEALING: EmotionCategory.SADNESS,
    EmotionCategory.FRUSTRATION: EmotionCategory.ANGER,
    EmotionCategory.RESENTMENT: EmotionCategory.ANGER,
    EmotionCategory.ISOLATION: EmotionCategory.LONELINESS,
    EmotionCategory.SHAME: EmotionCategory.GUILT,
    EmotionCategory.REGRET: EmotionCategory.GUILT,
    EmotionCategory.FORGIVENESS: EmotionCategory.GUILT,
    EmotionCategory.FAITH: EmotionCategory.HOPE,
    EmotionCategory.TRUST: EmotionCategory.HOPE,
    EmotionCategory.RESTORATION: EmotionCategory.HOPE,
    EmotionCategory.COURAGE: EmotionCategory.STRENGTH,
    EmotionCategory.PERSEVERANCE: EmotionCategory.STRENGTH,
    EmotionCategory.DOUBT: EmotionCategory.GUIDANCE,
    EmotionCategory.CONFUSION: EmotionCategory.GUIDANCE,
    EmotionCategory.UNCERTAINTY: EmotionCategory.GUIDANCE,
    EmotionCategory.WISDOM: EmotionCategory.GUIDANCE,
    EmotionCategory.DIRECTION: EmotionCategory.GUIDANCE,
})


def validate_table(table: Mapping[EmotionCategory, Iterable[str]]) -> None:
    """Raise ValueError unless every entry holds exactly five unique references."""
    for category, verses in table.items():
        refs = list(verses)
        if len(refs) != VERSES_PER_CATEGORY:
            raise ValueError(
                f"Category '{category.value}' has {len(refs)} verses, "
                f"expected {VERSES_PER_CATEGORY}"
            )
        if len(set(refs)) != len(refs):
            raise ValueError(f"Category '{category.value}' lists a verse twice")
        if any(not ref or not ref.strip() for ref in refs):
            raise ValueError(f"Category '{category.value}' has an empty verse reference")


def validate_fallback(verses: Iterable[str]) -> tuple[str, ...]:
    """Return the fallback list as a tuple, or raise ValueError if unusable."""
    refs = tuple(verses)
    if not refs:
        raise ValueError("Fallback verse list must not be empty")
    if len(set(refs)) != len(refs):
        raise ValueError("Fallback verse list contains duplicates")
    if any(not ref or not ref.strip() for ref in refs):
        raise ValueError("Fallback verse list contains an empty reference")
    return refs


def is_mapped_category(category: EmotionCategory) -> bool:
    """Check if a category carries its own verse list."""
    return category in VERSE_CATEGORIES


def resolve_category(
    category: EmotionCategory | None,
    table: Mapping[EmotionCategory, tuple[str, ...]] = VERSE_CATEGORIES,
) -> EmotionCategory | None:
    """Return the table category whose verses serve `category`, or None."""
    if category is None:
        return None
    if category in table:
        return category
    alias = CATEGORY_ALIASES.get(category)
    if alias is not None and alias in table:
        return alias
    logger.debug("No verses for category '%s'", category.value)
    return None


def get_category_verses(
    category: EmotionCategory,
    table: Mapping[EmotionCategory, tuple[str, ...]] = VERSE_CATEGORIES,
) -> tuple[str, ...]:
    """Return the ordered verses for a category, or an empty tuple."""
    resolved = resolve_category(category, table)
    if resolved is None:
        return ()
    return tuple(table[resolved])


def get_category_info(category: EmotionCategory) -> dict[str, Any] | None:
    """Return label/description metadata for a table category, or None."""
    info = CATEGORY_INFO.get(category)
    if info is None:
        return None
    return {"id": category.value, **info}


def list_categories() -> list[dict[str, Any]]:
    """List every table category with its metadata and verses, in priority order."""
    return [
        {
            "id": category.value,
            "label": CATEGORY_INFO[category]["label"],
            "description": CATEGORY_INFO[category]["description"],
            "verses": list(verses),
        }
        for category, verses in VERSE_CATEGORIES.items()
    ]


validate_table(VERSE_CATEGORIES)
validate_fallback(FALLBACK_VERSES)
