"""Tests for the verse tables, category aliases and table validation."""

import pytest

from engine.classifier import EMOTION_KEYWORDS
from engine.models import EmotionCategory
from engine.verse_index import (
    CATEGORY_PRIORITY,
    FALLBACK_VERSES,
    VERSE_CATEGORIES,
    get_category_info,
    get_category_verses,
    is_mapped_category,
    list_categories,
    resolve_category,
    validate_fallback,
    validate_table,
)


def test_every_category_has_five_unique_verses():
    assert len(VERSE_CATEGORIES) == 10
    for category, verses in VERSE_CATEGORIES.items():
        assert len(verses) == 5, category
        assert len(set(verses)) == 5, category


def test_priority_follows_declaration_order():
    assert CATEGORY_PRIORITY[:3] == (
        EmotionCategory.ANXIETY,
        EmotionCategory.FEAR,
        EmotionCategory.SADNESS,
    )
    assert CATEGORY_PRIORITY[-1] == EmotionCategory.PEACE


def test_lexicon_covers_the_table_in_the_same_order():
    assert tuple(EMOTION_KEYWORDS) == CATEGORY_PRIORITY
    seen: set[str] = set()
    for keywords in EMOTION_KEYWORDS.values():
        for keyword in keywords:
            assert keyword not in seen, keyword
            seen.add(keyword)


def test_fallback_list():
    assert len(FALLBACK_VERSES) == 10
    assert len(set(FALLBACK_VERSES)) == 10
    assert FALLBACK_VERSES[0] == "PSA.23.1-PSA.23.6"


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        VERSE_CATEGORIES[EmotionCategory.JOY] = ("PSA.16.11",)  # type: ignore[index]


def test_first_anxiety_verse():
    assert VERSE_CATEGORIES[EmotionCategory.ANXIETY][0] == "PHP.4.6-PHP.4.7"


def test_aliases_resolve_onto_table():
    assert resolve_category(EmotionCategory.WORRY) == EmotionCategory.ANXIETY
    assert resolve_category(EmotionCategory.GRIEF) == EmotionCategory.SADNESS
    assert resolve_category(EmotionCategory.COURAGE) == EmotionCategory.STRENGTH
    assert resolve_category(EmotionCategory.DOUBT) == EmotionCategory.GUIDANCE
    assert resolve_category(EmotionCategory.PEACE) == EmotionCategory.PEACE


def test_unmapped_categories_resolve_to_none():
    for category in (EmotionCategory.JOY, EmotionCategory.GRATITUDE, EmotionCategory.LOVE):
        assert resolve_category(category) is None
        assert get_category_verses(category) == ()
        assert not is_mapped_category(category)
    assert resolve_category(None) is None


def test_get_category_verses_via_alias():
    assert get_category_verses(EmotionCategory.GRIEF) == VERSE_CATEGORIES[EmotionCategory.SADNESS]


def test_category_info_and_listing():
    info = get_category_info(EmotionCategory.FEAR)
    assert info == {"id": "fear", "label": "Fear", "description": "When someone is afraid or scared."}
    assert get_category_info(EmotionCategory.JOY) is None

    listed = list_categories()
    assert [c["id"] for c in listed][:2] == ["anxiety", "fear"]
    assert all(len(c["verses"]) == 5 for c in listed)


def test_validate_table_rejects_wrong_size():
    with pytest.raises(ValueError, match="expected 5"):
        validate_table({EmotionCategory.HOPE: ("JER.29.11", "ROM.15.13")})


def test_validate_table_rejects_duplicates():
    with pytest.raises(ValueError, match="twice"):
        validate_table({EmotionCategory.HOPE: ("JER.29.11",) * 5})


def test_validate_fallback():
    assert validate_fallback(["JHN.3.16"]) == ("JHN.3.16",)
    with pytest.raises(ValueError):
        validate_fallback([])
    with pytest.raises(ValueError):
        validate_fallback(["JHN.3.16", "JHN.3.16"])
    with pytest.raises(ValueError):
        validate_fallback(["JHN.3.16", " "])
