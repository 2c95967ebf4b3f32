"""
models.py -- Pydantic models for the Scripture Pal verse matching engine.

Defines: EmotionCategory, UserRequest, EmotionAnalysis, UserPreferences,
VerseMatchRequest, VerseMatchResponse.
All data crossing component boundaries uses these models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_TRANSLATION: str = "de4e12af7f28f599-02"  # ESV
DEFAULT_WAKE_PHRASE: str = "Hey Scripture Pal"
SUPPORTED_LANGUAGES: tuple[str, ...] = ("en-US", "en-GB", "es-ES", "fr-FR")


# ---------------------------------------------------------------------------
# Valid enumerations
# ---------------------------------------------------------------------------

class EmotionCategory(str, Enum):
    """Every emotion the engine can name. Only some carry their own verses."""

    ANXIETY = "anxiety"
    FEAR = "fear"
    WORRY = "worry"
    SADNESS = "sadness"
    GRIEF = "grief"
    DEPRESSION = "depression"
    ANGER = "anger"
    FRUSTRATION = "frustration"
    RESENTMENT = "resentment"
    LONELINESS = "loneliness"
    ISOLATION = "isolation"
    GUILT = "guilt"
    SHAME = "shame"
    REGRET = "regret"
    DOUBT = "doubt"
    CONFUSION = "confusion"
    UNCERTAINTY = "uncertainty"
    HOPE = "hope"
    FAITH = "faith"
    TRUST = "trust"
    GRATITUDE = "gratitude"
    JOY = "joy"
    PEACE = "peace"
    LOVE = "love"
    COMPASSION = "compassion"
    FORGIVENESS = "forgiveness"
    STRENGTH = "strength"
    COURAGE = "courage"
    PERSEVERANCE = "perseverance"
    GUIDANCE = "guidance"
    WISDOM = "wisdom"
    DIRECTION = "direction"
    HEALING = "healing"
    COMFORT = "comfort"
    RESTORATION = "restoration"


class InputSource(str, Enum):
    VOICE = "voice"
    TEXT = "text"


class ResponseLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class _CamelModel(BaseModel):
    """Base for models exchanged with clients: camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------

class UserRequest(BaseModel):
    """One user interaction, as typed or as transcribed from speech."""

    model_config = ConfigDict(frozen=True)

    original_text: str
    processed_text: str
    timestamp: datetime = Field(default_factory=datetime.now)
    source: InputSource = InputSource.TEXT


class TTSConfig(_CamelModel):
    """Voice synthesis settings. Ranges are checked by validate_configuration."""

    voice: Optional[str] = None
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0
    language: str = "en-US"


class UserPreferences(_CamelModel):
    """Per-user settings that shape a verse match response."""

    preferred_translation: str = DEFAULT_TRANSLATION
    voice_settings: TTSConfig = Field(default_factory=TTSConfig)
    wake_phrase: str = DEFAULT_WAKE_PHRASE
    debug_mode: bool = False
    response_length: ResponseLength = ResponseLength.MEDIUM
    include_explanation: bool = True
    max_alternative_verses: int = 2


class VerseMatchRequest(_CamelModel):
    """Request body for VerseMatcher.match and the /match endpoint."""

    text: str
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    source: InputSource = InputSource.TEXT


# ---------------------------------------------------------------------------
# Intermediate model -- classifier output
# ---------------------------------------------------------------------------

class EmotionAnalysis(_CamelModel):
    """Result of classifying one request. No primary emotion means no match."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    primary_emotion: Optional[EmotionCategory] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    secondary_emotions: list[EmotionCategory] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    context: str = ""

    @property
    def is_match(self) -> bool:
        return self.primary_emotion is not None


# ---------------------------------------------------------------------------
# Output model
# ---------------------------------------------------------------------------

class VerseMatchResponse(_CamelModel):
    """The verses chosen for one request, with the reasons they were chosen."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    primary_verse: str
    alternative_verses: list[str] = Field(default_factory=list)
    explanation: Optional[str] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    matching_reasons: list[str] = Field(default_factory=list)
    category: Optional[EmotionCategory] = None
    translation: str = DEFAULT_TRANSLATION
