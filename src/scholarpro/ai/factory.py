from typing import Any

from ..config import ScholarConfig
from .base import AIProvider
from .providers import GeminiProvider


def create_ai_provider(provider: str, **config: Any) -> AIProvider:
    """Create an AI provider instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type (currently only 'gemini')
        **config: Provider configuration
            For Gemini:
                - api_key: str (required)
                - solver_model: str (default: 'gemini-2.5-flash')
                - thinking_model: str (default: 'gemini-2.5-pro')
                - tts_model / tts_voice: speech synthesis settings
                - search_model: str (default: 'gemini-2.5-flash')
                - live_model / live_voice: streaming conversation settings
                Any key that is not a ScholarConfig field is passed to
                the underlying genai.Client.

    Returns:
        Initialized AI provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_ai_provider("gemini", api_key="...")

        >>> provider = create_ai_provider(
        ...     "gemini",
        ...     api_key="...",
        ...     thinking_model="gemini-2.5-pro"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("gemini", "google"):
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        settings = {
            key: config.pop(key)
            for key in list(config)
            if key in ScholarConfig.model_fields
        }
        return GeminiProvider(ScholarConfig(**settings), **config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini'"
    )
