"""Runtime configuration.

Centralizes capture constants and environment lookup. The API key
is the only required setting; without it no remote call can succeed, so its
absence is a fatal ConfigurationError rather than a degraded mode.
"""

import os

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError
from .translations import Language
from .llm.providers.gemini import DEFAULT_CHAT_MODEL, DEFAULT_TTS_MODEL, DEFAULT_VOICE

# Microphone capture
CAPTURE_SAMPLE_RATE = 16000
CAPTURE_CHANNELS = 1
CAPTURE_BLOCK_SIZE = 1024

DEFAULT_LOG_LEVEL = "WARNING"


class Settings(BaseModel):
    """Resolved application settings."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1, description="Gemini API key")
    chat_model: str = Field(default=DEFAULT_CHAT_MODEL)
    tts_model: str = Field(default=DEFAULT_TTS_MODEL)
    voice: str = Field(default=DEFAULT_VOICE, description="Prebuilt TTS voice name")
    language: Language = Field(default=Language.PL, description="Default answer language")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)


def load_settings() -> Settings:
    """Build settings from environment variables.

    Environment variables:
        GEMINI_API_KEY: Gemini API key (required; API_KEY is accepted too)
        SOFIA_CHAT_MODEL: Chat model (default: gemini-3-pro-preview)
        SOFIA_TTS_MODEL: Speech model (default: gemini-2.5-flash-preview-tts)
        SOFIA_VOICE: Prebuilt voice (default: Kore)
        SOFIA_LANGUAGE: PL or RU (default: PL)
        SOFIA_LOG_LEVEL: loguru level name (default: WARNING)

    Raises:
        ConfigurationError: If the API key is missing or a value is invalid
    """
    api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if not api_key:
        raise ConfigurationError("GEMINI_API_KEY is not set in the environment")

    language_value = os.getenv("SOFIA_LANGUAGE", Language.PL.value).upper()
    try:
        language = Language(language_value)
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported SOFIA_LANGUAGE: {language_value}. Supported: PL, RU"
        ) from e

    log_level = os.getenv("SOFIA_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    try:
        logger.level(log_level)
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported SOFIA_LOG_LEVEL: {log_level}. Use a loguru level such as DEBUG or WARNING"
        ) from e

    return Settings(
        api_key=api_key,
        chat_model=os.getenv("SOFIA_CHAT_MODEL", DEFAULT_CHAT_MODEL),
        tts_model=os.getenv("SOFIA_TTS_MODEL", DEFAULT_TTS_MODEL),
        voice=os.getenv("SOFIA_VOICE", DEFAULT_VOICE),
        language=language,
        log_level=log_level,
    )
