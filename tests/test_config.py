"""Tests for environment loading and configuration validation."""

from engine.config import (
    AppConfig,
    OpenAIConfig,
    VoiceInputConfig,
    get_environment_info,
    load_config,
    validate_configuration,
)
from engine.models import DEFAULT_TRANSLATION, TTSConfig


def test_defaults():
    config = load_config({})
    assert config.api.model == "gpt-3.5-turbo"
    assert config.api.timeout_ms == 15000
    assert config.voice_input.timeout_ms == 10000
    assert config.user_preferences.preferred_translation == DEFAULT_TRANSLATION
    assert config.performance.cache_enabled is True
    assert config.performance.cache_ttl_ms == 300000
    assert config.performance.max_cache_size == 100
    assert config.performance.max_retry_attempts == 3
    assert config.features.voice_input is True
    assert config.features.openai_integration is False
    assert config.logging.enabled is False
    assert not config.environment.is_development
    assert not config.environment.is_production


def test_defaults_are_valid():
    result = validate_configuration(load_config({}))
    assert result.is_valid
    assert result.errors == []


def test_short_api_timeout_is_invalid():
    result = validate_configuration(load_config({"OPENAI_API_TIMEOUT": "500"}))
    assert not result.is_valid
    assert result.errors == ["OPENAI_API_TIMEOUT should be at least 1000ms (1 second)"]


def test_short_voice_timeout_is_invalid():
    result = validate_configuration(load_config({"VOICE_INPUT_TIMEOUT": "4000"}))
    assert result.errors == ["VOICE_INPUT_TIMEOUT should be at least 5000ms (5 seconds)"]


def test_tts_ranges():
    config = AppConfig(tts=TTSConfig(rate=20, pitch=-1, volume=1.5))
    result = validate_configuration(config)
    assert result.errors == [
        "TTS rate should be between 0.1 and 10 (0.1 = very slow, 10 = very fast)",
        "TTS pitch should be between 0 and 2 (0 = very low, 2 = very high)",
        "TTS volume should be between 0 and 1 (0 = silent, 1 = maximum)",
    ]


def test_tts_boundaries_are_valid():
    config = AppConfig(tts=TTSConfig(rate=0.1, pitch=2, volume=0))
    assert validate_configuration(config).is_valid


def test_all_violations_reported_together():
    config = AppConfig(
        api=OpenAIConfig(timeout_ms=10),
        voice_input=VoiceInputConfig(timeout_ms=10),
        tts=TTSConfig(rate=0, pitch=3, volume=-1),
    )
    assert len(validate_configuration(config).errors) == 5


def test_non_numeric_falls_back_to_default():
    config = load_config({"OPENAI_API_TIMEOUT": "abc", "MAX_CACHE_SIZE": "lots"})
    assert config.api.timeout_ms == 15000
    assert config.performance.max_cache_size == 100


def test_bool_parsing():
    config = load_config({
        "FEATURE_OPENAI": "TRUE",
        "FEATURE_TTS": "yes",
        "CACHE_ENABLED": "0",
        "LOG_TO_FILE": "1",
    })
    assert config.features.openai_integration is True
    assert config.features.text_to_speech is False
    assert config.performance.cache_enabled is False
    assert config.logging.log_to_file is True


def test_log_level():
    assert load_config({"LOG_LEVEL": "WARN"}).logging.level == "warn"
    assert load_config({"LOG_LEVEL": "verbose"}).logging.level == "info"


def test_development_environment():
    config = load_config({"APP_ENV": "development"})
    assert config.environment.is_development
    assert config.logging.enabled
    assert config.logging.include_context
    assert config.user_preferences.debug_mode
    assert config.features.crash_reporting is False


def test_production_enables_crash_reporting():
    config = load_config({"APP_ENV": "production"})
    assert config.environment.is_production
    assert config.features.crash_reporting is True
    assert config.logging.enabled is False


def test_api_key_is_shared():
    config = load_config({"OPENAI_API_KEY": "sk-secret", "OPENAI_MODEL": "gpt-4o-mini"})
    assert config.api.api_key == "sk-secret"
    assert config.app.openai_api_key == "sk-secret"
    assert config.api.model == "gpt-4o-mini"


def test_environment_info_hides_secrets():
    config = load_config({"OPENAI_API_KEY": "sk-secret", "BUILD_TIME": "2024-01-01T00:00:00Z"})
    info = get_environment_info(config)
    assert info["apis"]["openai"] == {"configured": True, "model": "gpt-3.5-turbo"}
    assert info["buildTime"] == "2024-01-01T00:00:00Z"
    assert info["environment"] == "production"
    assert "voice_input" in info["features"]
    assert "sk-secret" not in str(info)


def test_numbers_use_leading_digits():
    config = load_config({"OPENAI_API_TIMEOUT": "15000ms", "CACHE_TTL": "1500.5", "VOICE_INPUT_TIMEOUT": " 8000 "})
    assert config.api.timeout_ms == 15000
    assert config.performance.cache_ttl_ms == 1500
    assert config.voice_input.timeout_ms == 8000
