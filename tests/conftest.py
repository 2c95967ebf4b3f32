"""Shared fixtures for the Scripture Pal test suite."""

import pytest

from engine.config import AppConfig, FeatureFlags, OpenAIConfig, load_config
from engine.models import UserPreferences
from engine.verse_matcher import VerseMatcher


@pytest.fixture
def matcher() -> VerseMatcher:
    return VerseMatcher()


@pytest.fixture
def preferences() -> UserPreferences:
    return UserPreferences()


@pytest.fixture
def config() -> AppConfig:
    return load_config({})


@pytest.fixture
def ai_config() -> AppConfig:
    return AppConfig(
        api=OpenAIConfig(api_key="sk-test"),
        features=FeatureFlags(openai_integration=True),
    )
