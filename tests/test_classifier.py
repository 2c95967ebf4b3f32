"""Tests for text normalization and keyword emotion classification."""

import pytest

from engine.classifier import (
    EMOTION_KEYWORDS,
    build_user_request,
    classify,
    find_keywords,
    normalize_text,
)
from engine.models import EmotionCategory, InputSource


def test_normalize_text():
    assert normalize_text("  I’m   Really\nANXIOUS ") == "i'm really anxious"
    assert normalize_text("") == ""
    assert normalize_text(None) == ""  # type: ignore[arg-type]


def test_build_user_request_keeps_original():
    request = build_user_request("  I Feel ALONE ", InputSource.VOICE)
    assert request.original_text == "  I Feel ALONE "
    assert request.processed_text == "i feel alone"
    assert request.source == InputSource.VOICE


def test_anxious_input():
    analysis = classify("I'm really anxious about tomorrow")
    assert analysis.primary_emotion == EmotionCategory.ANXIETY
    assert analysis.confidence > 0
    assert analysis.keywords == ["anxious"]
    assert analysis.secondary_emotions == []
    assert analysis.is_match


@pytest.mark.parametrize("text", ["", "   ", "asdkjasdj", "the weather is fine today"])
def test_no_match(text):
    analysis = classify(text)
    assert analysis.primary_emotion is None
    assert analysis.confidence == 0.0
    assert analysis.keywords == []
    assert not analysis.is_match


def test_non_string_input_is_no_match():
    analysis = classify(None)  # type: ignore[arg-type]
    assert analysis.primary_emotion is None
    assert analysis.context == ""


def test_keywords_match_whole_words_only():
    hits = find_keywords("i feel restless tonight")
    assert EmotionCategory.ANXIETY in hits
    assert EmotionCategory.PEACE not in hits


def test_multiword_keyword():
    analysis = classify("Some days I just want to give up")
    assert analysis.primary_emotion == EmotionCategory.STRENGTH
    assert analysis.keywords == ["give up"]


def test_tie_goes_to_earlier_category():
    analysis = classify("I'm scared and angry")
    assert analysis.primary_emotion == EmotionCategory.FEAR
    assert analysis.secondary_emotions == [EmotionCategory.ANGER]
    assert analysis.confidence == pytest.approx(1 / len(EMOTION_KEYWORDS[analysis.primary_emotion]))


def test_most_hits_wins_over_priority():
    analysis = classify("I'm lonely, alone and abandoned but a bit worried")
    assert analysis.primary_emotion == EmotionCategory.LONELINESS
    assert analysis.keywords == ["lonely", "alone", "abandoned"]
    assert analysis.secondary_emotions == [EmotionCategory.ANXIETY]
    assert analysis.confidence == pytest.approx(3 / len(EMOTION_KEYWORDS[EmotionCategory.LONELINESS]))


def test_secondary_order_by_hits_then_priority():
    analysis = classify("i am sad and crying, scared, and so tired")
    assert analysis.primary_emotion == EmotionCategory.SADNESS
    assert analysis.secondary_emotions == [EmotionCategory.FEAR, EmotionCategory.STRENGTH]


@pytest.mark.parametrize("text", [
    "anxious anxious anxious",
    "I'm afraid, lost, tired and guilty",
    "peace",
    "HOPE!!!",
])
def test_confidence_is_bounded(text):
    analysis = classify(text)
    assert 0.0 <= analysis.confidence <= 1.0


def test_repeated_keyword_counts_once():
    analysis = classify("worried worried worried and scared")
    assert analysis.keywords == ["worried"]
    assert analysis.confidence == pytest.approx(1 / len(EMOTION_KEYWORDS[analysis.primary_emotion]))


def test_single_weak_hit_is_not_full_confidence():
    analysis = classify("i'm a bit worried")
    assert analysis.primary_emotion == EmotionCategory.ANXIETY
    assert 0.0 < analysis.confidence < 1.0


def test_more_hits_raise_confidence():
    weak = classify("i'm a bit worried")
    strong = classify("i'm worried, anxious and stressed")
    assert strong.confidence > weak.confidence
