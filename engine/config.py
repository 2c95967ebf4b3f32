"""Configuration management for Scripture Pal.

Builds one AppConfig from environment variables (a .env file is loaded by the
entry points) with fallback to defaults. The config is constructed once at
startup and handed to every component that needs it.
"""
import logging
import os
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from engine.models import DEFAULT_TRANSLATION, DEFAULT_WAKE_PHRASE, TTSConfig, UserPreferences
from engine.verse_index import FALLBACK_VERSES

logger = logging.getLogger(__name__)

LogLevel = Literal["debug", "info", "warn", "error"]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class EnvironmentInfo(BaseModel):
    """Where and how the process is running."""
    is_development: bool = False
    is_production: bool = False
    platform: str = "pi"


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    model: str = "gpt-3.5-turbo"
    timeout_ms: int = 15000


class VoiceInputConfig(BaseModel):
    """How the app listens."""
    wake_phrase: str = DEFAULT_WAKE_PHRASE
    language: str = "en-US"
    continuous: bool = True
    interim_results: bool = True
    max_alternatives: int = 3
    timeout_ms: int = 10000


class AppSettings(BaseModel):
    """Main application settings."""
    openai_api_key: str = ""
    default_translation: str = DEFAULT_TRANSLATION
    fallback_verses: tuple[str, ...] = FALLBACK_VERSES
    enable_logging: bool = False
    voice_input_timeout: int = 10000


class LoggingConfig(BaseModel):
    """Logging configuration."""
    enabled: bool = False
    level: LogLevel = "info"
    include_timestamp: bool = True
    include_context: bool = False
    max_log_size: int = 1000
    log_to_file: bool = False
    log_file: str = "scripture_pal.log"


class PerformanceConfig(BaseModel):
    """Timeouts, retries and caching."""
    voice_input_timeout_ms: int = 10000
    api_timeout_ms: int = 15000
    max_retry_attempts: int = 3
    retry_delay_ms: int = 1000
    cache_enabled: bool = True
    cache_ttl_ms: int = 300000
    max_cache_size: int = 100


class FeatureFlags(BaseModel):
    """Feature switches."""
    voice_input: bool = True
    text_to_speech: bool = True
    openai_integration: bool = False
    offline_mode: bool = False
    analytics: bool = False
    crash_reporting: bool = False


class AppConfig(BaseModel):
    """Main configuration container."""
    environment: EnvironmentInfo = Field(default_factory=EnvironmentInfo)
    api: OpenAIConfig = Field(default_factory=OpenAIConfig)
    user_preferences: UserPreferences = Field(default_factory=UserPreferences)
    voice_input: VoiceInputConfig = Field(default_factory=VoiceInputConfig)
    tts: TTSConfig = Field(default_factory=TTSConfig)
    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    version: str = "1.0.0"
    build_time: Optional[str] = None


class ConfigValidationResult(BaseModel):
    """Outcome of validate_configuration."""
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Load configuration from environment variables.

    Priority:
    1. Environment variables (or the mapping passed in)
    2. Default values

    Args:
        env: Mapping to read instead of os.environ (used by tests).

    Returns:
        AppConfig with all settings. Never raises: unparsable numbers fall
        back to their defaults.
    """
    source: Mapping[str, str] = os.environ if env is None else env

    def get_optional(key: str, default: str = "") -> str:
        return source.get(key) or default

    def get_bool(key: str, default: bool = False) -> bool:
        value = source.get(key)
        if not value:
            return default
        return value.lower() == "true" or value == "1"

    def get_number(key: str, default: int) -> int:
        """Leading integer of the value ("15000ms" -> 15000), else the default."""
        value = source.get(key)
        if not value:
            return default
        match = _LEADING_INT.match(value)
        if match is None:
            logger.warning("Ignoring non-numeric %s=%r, using %d", key, value, default)
            return default
        return int(match.group(1), 10)

    app_env = get_optional("APP_ENV").lower()
    environment = EnvironmentInfo(
        is_development=app_env == "development",
        is_production=app_env == "production",
        platform=get_optional("PLATFORM", "pi"),
    )

    api = OpenAIConfig(
        api_key=get_optional("OPENAI_API_KEY"),
        model=get_optional("OPENAI_MODEL", "gpt-3.5-turbo"),
        timeout_ms=get_number("OPENAI_API_TIMEOUT", 15000),
    )

    preferences = UserPreferences(debug_mode=environment.is_development)

    voice_input = VoiceInputConfig(
        wake_phrase=preferences.wake_phrase,
        timeout_ms=get_number("VOICE_INPUT_TIMEOUT", 10000),
    )

    enable_logging = get_bool("ENABLE_LOGGING", environment.is_development)
    app = AppSettings(
        openai_api_key=api.api_key,
        enable_logging=enable_logging,
        voice_input_timeout=voice_input.timeout_ms,
    )

    level = get_optional("LOG_LEVEL", "info").lower()
    if level not in ("debug", "info", "warn", "error"):
        logger.warning("Unknown LOG_LEVEL %r, using 'info'", level)
        level = "info"
    logging_config = LoggingConfig(
        enabled=enable_logging,
        level=level,
        include_context=environment.is_development,
        max_log_size=get_number("MAX_LOG_SIZE", 1000),
        log_to_file=get_bool("LOG_TO_FILE", False),
        log_file=get_optional("LOG_FILE", "scripture_pal.log"),
    )

    performance = PerformanceConfig(
        voice_input_timeout_ms=voice_input.timeout_ms,
        api_timeout_ms=api.timeout_ms,
        cache_enabled=get_bool("CACHE_ENABLED", True),
        cache_ttl_ms=get_number("CACHE_TTL", 300000),
        max_cache_size=get_number("MAX_CACHE_SIZE", 100),
    )

    features = FeatureFlags(
        voice_input=get_bool("FEATURE_VOICE_INPUT", True),
        text_to_speech=get_bool("FEATURE_TTS", True),
        openai_integration=get_bool("FEATURE_OPENAI", False),
        offline_mode=get_bool("FEATURE_OFFLINE", False),
        analytics=get_bool("FEATURE_ANALYTICS", False),
        crash_reporting=get_bool("FEATURE_CRASH_REPORTING", environment.is_production),
    )

    return AppConfig(
        environment=environment,
        api=api,
        user_preferences=preferences,
        voice_input=voice_input,
        tts=TTSConfig(),
        app=app,
        logging=logging_config,
        performance=performance,
        features=features,
        version=get_optional("APP_VERSION", "1.0.0"),
        build_time=get_optional("BUILD_TIME") or None,
    )


def validate_configuration(config: AppConfig) -> ConfigValidationResult:
    """Check numeric ranges. Never raises; the caller decides what to do."""
    errors: list[str] = []

    if not config.api.api_key:
        logger.info("OpenAI API key not set - ChatGPT features will be disabled")

    if config.api.timeout_ms < 1000:
        errors.append("OPENAI_API_TIMEOUT should be at least 1000ms (1 second)")

    if config.voice_input.timeout_ms < 5000:
        errors.append("VOICE_INPUT_TIMEOUT should be at least 5000ms (5 seconds)")

    tts = config.tts
    if tts.rate < 0.1 or tts.rate > 10:
        errors.append("TTS rate should be between 0.1 and 10 (0.1 = very slow, 10 = very fast)")
    if tts.pitch < 0 or tts.pitch > 2:
        errors.append("TTS pitch should be between 0 and 2 (0 = very low, 2 = very high)")
    if tts.volume < 0 or tts.volume > 1:
        errors.append("TTS volume should be between 0 and 1 (0 = silent, 1 = maximum)")

    for message in errors:
        logger.warning("Invalid configuration: %s", message)

    return ConfigValidationResult(is_valid=not errors, errors=errors)


def get_environment_info(config: AppConfig) -> dict[str, Any]:
    """Summarize the running configuration without exposing secrets."""
    env = config.environment
    return {
        "platform": env.platform,
        "environment": "development" if env.is_development else "production",
        "version": config.version,
        "buildTime": config.build_time or datetime.now(timezone.utc).isoformat(),
        "features": [name for name, enabled in config.features.model_dump().items() if enabled],
        "apis": {
            "openai": {
                "configured": bool(config.api.api_key),
                "model": config.api.model,
            },
        },
    }
