"""
verse_matcher.py -- Turn an emotion analysis into a verse match response.

Matching strategy:
1. Category match: the category's first verse is the primary, the next
   min(max_alternative_verses, 4) are alternatives.
2. Fallback: when no category applies, a fixed-index draw from the
   fallback list keyed on a hash of the request text.

Pure data transformation over in-memory tables. Never raises.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from engine.classifier import EMOTION_KEYWORDS, build_user_request, classify
from engine.explanation_builder import (
    build_fallback_explanation,
    build_match_explanation,
    build_matching_reasons,
)
from engine.models import (
    EmotionAnalysis,
    EmotionCategory,
    UserPreferences,
    VerseMatchRequest,
    VerseMatchResponse,
)
from engine.verse_index import (
    FALLBACK_VERSES,
    VERSE_CATEGORIES,
    resolve_category,
    validate_fallback,
    validate_table,
)

logger = logging.getLogger(__name__)


def _text_hash(text: str) -> int:
    """Stable SHA-256 of the text as an integer (hash() is salted per process)."""
    return int(hashlib.sha256(text.strip().encode("utf-8")).hexdigest(), 16)


def fallback_index(context: str, size: int) -> int:
    """Pick a fallback position for a request. Empty text always gets 0."""
    if size <= 0 or not context or not context.strip():
        return 0
    return _text_hash(context) % size


class VerseMatcher:
    """Classifies requests and assembles verse match responses."""

    def __init__(
        self,
        table: Mapping[EmotionCategory, tuple[str, ...]] = VERSE_CATEGORIES,
        fallback_verses: Iterable[str] = FALLBACK_VERSES,
        lexicon: Mapping[EmotionCategory, tuple[str, ...]] = EMOTION_KEYWORDS,
    ) -> None:
        validate_table(table)
        self._table = table
        self._fallback = validate_fallback(fallback_verses)
        self._lexicon = lexicon

    @property
    def fallback_verses(self) -> tuple[str, ...]:
        return self._fallback

    def reset_fallback(self, verses: Iterable[str]) -> None:
        """Replace the fallback list used for every later no-match request."""
        self._fallback = validate_fallback(verses)
        logger.info("Fallback verse list reset (%d verses)", len(self._fallback))

    def classify(self, text: str) -> EmotionAnalysis:
        return classify(text, self._lexicon)

    def match(self, request: VerseMatchRequest) -> VerseMatchResponse:
        """Classify the request text and return the matching verses."""
        user_request = build_user_request(request.text, request.source)
        analysis = self.classify(user_request.processed_text)
        return self.match_analysis(analysis, request.preferences)

    def match_analysis(
        self,
        analysis: EmotionAnalysis,
        preferences: Optional[UserPreferences] = None,
    ) -> VerseMatchResponse:
        """Build the response for an analysis. Unknown categories fall back."""
        prefs = preferences or UserPreferences()
        max_alternatives = max(int(prefs.max_alternative_verses), 0)

        category = resolve_category(analysis.primary_emotion, self._table)
        verses = tuple(self._table[category]) if category is not None else ()

        if category is not None and verses:
            primary = verses[0]
            alternatives = list(verses[1:1 + min(max_alternatives, len(verses) - 1)])
            confidence = analysis.confidence
            explanation = build_match_explanation(
                category, primary, analysis.keywords, prefs.response_length,
                emotion=analysis.primary_emotion,
            )
            reasons = build_matching_reasons(analysis, category)
            logger.info(
                "Matched '%s' -> %s (+%d alternatives)",
                category.value,
                primary,
                len(alternatives),
            )
        else:
            category = None
            size = len(self._fallback)
            start = fallback_index(analysis.context, size)
            primary = self._fallback[start]
            count = min(max_alternatives, size - 1)
            alternatives = [self._fallback[(start + i) % size] for i in range(1, count + 1)]
            confidence = 0.0
            explanation = build_fallback_explanation(primary, prefs.response_length)
            reasons = build_matching_reasons(analysis, None)
            logger.info(
                "No category for %s -> fallback verse %s",
                analysis.primary_emotion.value if analysis.primary_emotion else "input",
                primary,
            )

        return VerseMatchResponse(
            primary_verse=primary,
            alternative_verses=alternatives,
            explanation=explanation if prefs.include_explanation else None,
            confidence=confidence,
            matching_reasons=reasons,
            category=category,
            translation=prefs.preferred_translation,
        )
