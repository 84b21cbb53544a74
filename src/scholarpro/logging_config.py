import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# google-genai and its transports are chatty at DEBUG
_NOISY_LOGGERS = ("httpx", "httpcore", "websockets", "google_genai")


def resolve_level(level: str | None = None) -> int:
    """Map a level name to a logging level; unknown names mean INFO."""
    level_name = (level or os.getenv("SCHOLAR_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, level_name, logging.INFO)


def setup_logging(level: str | None = None, console: bool = True) -> None:
    """Configure root logging for CLI and TUI runs.

    Args:
        level: Level name; falls back to SCHOLAR_LOG_LEVEL, then INFO
        console: Attach a stderr handler. The TUI passes False because
            writing to the terminal would corrupt the screen; it routes
            records to its log panel instead.
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(level))

    if console:
        logging.basicConfig(format=LOG_FORMAT)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
