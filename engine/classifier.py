"""
classifier.py -- Keyword emotion classification.

Responsibility:
- Normalize raw user text into the form the lexicon expects
- Scan the text for each table category's trigger keywords
- Pick the primary category by distinct hit count, ties by table order
- Never fail: anything unreadable is a no-match
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from functools import lru_cache
from types import MappingProxyType
from typing import Optional

from engine.models import EmotionAnalysis, EmotionCategory, InputSource, UserRequest

logger = logging.getLogger(__name__)

# Keys follow VERSE_CATEGORIES order. A keyword belongs to one category only.
EMOTION_KEYWORDS: Mapping[EmotionCategory, tuple[str, ...]] = MappingProxyType({
    EmotionCategory.ANXIETY: (
        "anxious", "anxiety", "worry", "worried", "worrying", "nervous",
        "stressed", "stress", "overwhelmed", "panic", "uneasy", "restless",
        "troubled",
    ),
    EmotionCategory.FEAR: (
        "afraid", "fear", "scared", "frightened", "terrified", "fearful",
        "dread", "threatened", "danger",
    ),
    EmotionCategory.SADNESS: (
        "sad", "sadness", "depressed", "depression", "grief", "grieving",
        "heartbroken", "mourning", "crying", "hopeless", "miserable",
        "unhappy", "loss",
    ),
    EmotionCategory.ANGER: (
        "angry", "anger", "mad", "furious", "frustrated", "frustration",
        "resentful", "resentment", "bitter", "rage", "annoyed", "irritated",
    ),
    EmotionCategory.LONELINESS: (
        "lonely", "loneliness", "alone", "isolated", "isolation", "abandoned",
        "forgotten", "rejected", "nobody", "left out",
    ),
    EmotionCategory.GUILT: (
        "guilty", "guilt", "ashamed", "shame", "regret", "regrets", "sinned",
        "forgive me", "my fault", "messed up",
    ),
    EmotionCategory.HOPE: (
        "hope", "hopeful", "hoping", "optimistic", "promise", "look forward",
        "new beginning", "better days",
    ),
    EmotionCategory.STRENGTH: (
        "weak", "weary", "tired", "exhausted", "strength", "strong",
        "give up", "giving up", "struggling", "persevere", "burned out",
    ),
    EmotionCategory.GUIDANCE: (
        "confused", "confusion", "lost", "decision", "decide", "direction",
        "guidance", "uncertain", "unsure", "wisdom", "doubt", "what to do",
    ),
    EmotionCategory.PEACE: (
        "peace", "peaceful", "calm", "rest", "quiet", "stillness", "serenity",
        "settle",
    ),
})

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Lower-case, unify apostrophes and collapse whitespace."""
    if not isinstance(text, str):
        return ""
    return _WHITESPACE.sub(" ", text.translate(_APOSTROPHES).lower()).strip()


def build_user_request(
    text: str,
    source: InputSource = InputSource.TEXT,
    timestamp: Optional[datetime] = None,
) -> UserRequest:
    """Wrap raw input in a UserRequest with its normalized form."""
    original = text if isinstance(text, str) else ""
    return UserRequest(
        original_text=original,
        processed_text=normalize_text(original),
        timestamp=timestamp or datetime.now(),
        source=source,
    )


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Match a keyword as whole words, so 'rest' never fires on 'restless'."""
    return re.compile(r"(?<![a-z])" + re.escape(keyword) + r"(?![a-z])")


def find_keywords(
    processed_text: str,
    lexicon: Mapping[EmotionCategory, tuple[str, ...]] = EMOTION_KEYWORDS,
) -> dict[EmotionCategory, list[str]]:
    """Return the distinct keywords found per category, in lexicon order."""
    hits: dict[EmotionCategory, list[str]] = {}
    for category, keywords in lexicon.items():
        found: list[str] = []
        for keyword in keywords:
            if keyword in found:
                continue
            if _keyword_pattern(keyword).search(processed_text):
                found.append(keyword)
        if found:
            hits[category] = found
    return hits


def classify(
    processed_text: str,
    lexicon: Mapping[EmotionCategory, tuple[str, ...]] = EMOTION_KEYWORDS,
) -> EmotionAnalysis:
    """
    Classify normalized text into an EmotionAnalysis.

    Primary category: the one with the most distinct keyword hits; ties go
    to the category declared first in the lexicon. Confidence is the
    primary's hits over the number of trigger keywords it was scanned
    for. Secondary categories
    are the remaining hits, by hit count then declaration order.
    """
    text = normalize_text(processed_text)
    if not text:
        return EmotionAnalysis(context="")

    hits = find_keywords(text, lexicon)
    if not hits:
        logger.debug("No emotion keywords in input (%d chars)", len(text))
        return EmotionAnalysis(context=text)

    priority = {category: index for index, category in enumerate(lexicon)}
    ranked = sorted(hits, key=lambda c: (-len(hits[c]), priority[c]))
    primary = ranked[0]

    considered = len(lexicon[primary])
    confidence = min(max(len(hits[primary]) / considered, 0.0), 1.0)

    logger.info(
        "Classified input as '%s' (confidence=%.2f, keywords=%s, secondary=%s)",
        primary.value,
        confidence,
        hits[primary],
        [c.value for c in ranked[1:]],
    )

    return EmotionAnalysis(
        primary_emotion=primary,
        confidence=confidence,
        secondary_emotions=ranked[1:],
        keywords=hits[primary],
        context=text,
    )
