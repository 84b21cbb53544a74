"""UI configuration constants.

Centralizes labels, ids and display limits for the UI module.
"""

import logging


class LogLevel:
    """Log level constants with numeric values for comparison.

    Values match the standard ``logging`` levels so records can be
    filtered without translation. Lower value = more verbose.
    """

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARN",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)

    @classmethod
    def from_record(cls, levelno: int) -> int:
        """Clamp a logging record level onto the four panel levels."""
        if levelno >= cls.ERROR:
            return cls.ERROR
        if levelno >= cls.WARNING:
            return cls.WARNING
        if levelno >= cls.INFO:
            return cls.INFO
        return cls.DEBUG


# Header
APP_TITLE = "Scholar Pro"
APP_SUBTITLE = "Your AI-powered academic assistant"

# Tabs (id, label)
TAB_SOLVER = "solver"
TAB_LIVE = "live"
TAB_SEARCH = "search"
TAB_LABELS = {
    TAB_SOLVER: "Exercise Solver",
    TAB_LIVE: "Live Conversation",
    TAB_SEARCH: "Web Search",
}

# Solver panel
SOLVE_BUTTON_LABEL = "Solve Problem"
SOLVE_BUTTON_BUSY_LABEL = "Solving..."
PLAY_LABEL = "▶ Play explanation"
PAUSE_LABEL = "⏸ Pause"
AUDIO_LOADING_LABEL = "Loading audio..."

# Live panel
START_LABEL = "Start Conversation"
CONNECTING_LABEL = "Connecting..."
STOP_LABEL = "Stop Conversation"
TRANSCRIPT_IDLE_PLACEHOLDER = "Transcription will appear here..."
TRANSCRIPT_LISTENING_PLACEHOLDER = "Listening..."

# Search panel
SOURCES_HEADING = "Sources:"

# Charts
CHART_BAR_WIDTH = 40  # Columns for the longest bar
CHART_LINE_HEIGHT = 10  # Rows in the line chart grid

# Log panel
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500  # Characters before truncating log messages
