"""Exception hierarchy for scholarpro.

Panels catch these at their boundary and show a fixed message; nothing
here is retried automatically.
"""


class ScholarError(Exception):
    """Base class for scholarpro errors."""


class ConfigurationError(ScholarError):
    """Required configuration (API key, models) is missing or invalid."""


class InputValidationError(ScholarError):
    """User input was rejected before any network call was made."""


class ProviderError(ScholarError):
    """The AI provider request failed or returned an unusable response."""

    def __init__(self, message: str, operation: str | None = None):
        msg = message
        if operation:
            msg = f"{operation}: {message}"
        super().__init__(msg)
        self.operation = operation


class NoAudioError(ProviderError):
    """Speech synthesis returned no audio payload."""

    def __init__(self, message: str = "No audio data received from API."):
        super().__init__(message, operation="generate_speech")


class MicrophoneError(ScholarError):
    """The capture device is missing or access to it was denied."""


class AudioOutputError(ScholarError):
    """The playback device could not be opened."""


class LiveSessionError(ScholarError):
    """The streaming transport of a live session failed."""
