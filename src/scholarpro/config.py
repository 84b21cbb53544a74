"""Application configuration.

Hides where settings come from (environment, .env file) and which
model identifiers and voices are used for each capability. A config
instance is passed explicitly to the provider; there is no global client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

DEFAULT_SOLVER_MODEL = "gemini-2.5-flash"
DEFAULT_THINKING_MODEL = "gemini-2.5-pro"
DEFAULT_THINKING_BUDGET = 32768
DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_TTS_VOICE = "Kore"
DEFAULT_SEARCH_MODEL = "gemini-2.5-flash"
DEFAULT_LIVE_MODEL = "gemini-2.5-flash-native-audio-preview-09-2025"
DEFAULT_LIVE_VOICE = "Zephyr"

# Audio formats expected by the live API and the TTS model
INPUT_SAMPLE_RATE = 16000
OUTPUT_SAMPLE_RATE = 24000
CAPTURE_BLOCK_SIZE = 4096


class ScholarConfig(BaseModel):
    """Credentials, model identifiers and audio settings."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1, description="Gemini API key")
    solver_model: str = Field(default=DEFAULT_SOLVER_MODEL)
    thinking_model: str = Field(
        default=DEFAULT_THINKING_MODEL,
        description="Model used when thinking mode is on"
    )
    thinking_budget: int = Field(default=DEFAULT_THINKING_BUDGET, ge=0)
    tts_model: str = Field(default=DEFAULT_TTS_MODEL)
    tts_voice: str = Field(default=DEFAULT_TTS_VOICE)
    search_model: str = Field(default=DEFAULT_SEARCH_MODEL)
    live_model: str = Field(default=DEFAULT_LIVE_MODEL)
    live_voice: str = Field(default=DEFAULT_LIVE_VOICE)
    input_sample_rate: int = Field(default=INPUT_SAMPLE_RATE, gt=0)
    output_sample_rate: int = Field(default=OUTPUT_SAMPLE_RATE, gt=0)
    capture_block_size: int = Field(default=CAPTURE_BLOCK_SIZE, gt=0)
    log_level: str = Field(default="INFO")


def load_config(**overrides: str | int) -> ScholarConfig:
    """Build a ScholarConfig from the environment.

    Environment variables:
        GEMINI_API_KEY: Gemini API key (API_KEY is accepted as well)
        SCHOLAR_SOLVER_MODEL: Model for regular solving
        SCHOLAR_THINKING_MODEL: Model for thinking mode
        SCHOLAR_TTS_MODEL / SCHOLAR_TTS_VOICE: Speech synthesis
        SCHOLAR_SEARCH_MODEL: Model for grounded search
        SCHOLAR_LIVE_MODEL / SCHOLAR_LIVE_VOICE: Live conversation
        SCHOLAR_LOG_LEVEL: Logging level (default: INFO)

    Args:
        **overrides: Explicit values that win over the environment

    Returns:
        Frozen configuration instance

    Raises:
        ConfigurationError: If no API key is available
    """
    load_dotenv()

    api_key = overrides.pop("api_key", None) or os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    if not api_key:
        raise ConfigurationError("API_KEY environment variable is not set")

    values: dict[str, str | int] = {"api_key": api_key}
    env_map = {
        "solver_model": "SCHOLAR_SOLVER_MODEL",
        "thinking_model": "SCHOLAR_THINKING_MODEL",
        "tts_model": "SCHOLAR_TTS_MODEL",
        "tts_voice": "SCHOLAR_TTS_VOICE",
        "search_model": "SCHOLAR_SEARCH_MODEL",
        "live_model": "SCHOLAR_LIVE_MODEL",
        "live_voice": "SCHOLAR_LIVE_VOICE",
        "log_level": "SCHOLAR_LOG_LEVEL",
    }
    for field_name, env_name in env_map.items():
        value = os.getenv(env_name)
        if value:
            values[field_name] = value

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ScholarConfig(**values)
