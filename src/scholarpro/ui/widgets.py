"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Log rendering and level filtering
- Transcript layout (user right, model left) and placeholders
- Source list and chart display
"""

from datetime import datetime

from rich.console import Group
from rich.markup import escape
from rich.text import Text
from textual.containers import VerticalScroll
from textual.events import Click
from textual.widgets import RichLog, Static

from ..ai.models import ChartData, Source
from ..live.models import Speaker, TranscriptionEntry
from .charts import build_chart
from .config import (
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    SOURCES_HEADING,
    TRANSCRIPT_IDLE_PLACEHOLDER,
    TRANSCRIPT_LISTENING_PLACEHOLDER,
    LogLevel,
)


def transcript_placeholder(is_active: bool, has_entries: bool) -> str | None:
    """Text shown in an empty transcript, None once entries exist."""
    if has_entries:
        return None
    return TRANSCRIPT_LISTENING_PLACEHOLDER if is_active else TRANSCRIPT_IDLE_PLACEHOLDER


def format_sources(sources: list[Source]) -> Text | None:
    """Numbered source list, or None when there is nothing to cite."""
    if not sources:
        return None
    text = Text(SOURCES_HEADING, style="bold")
    for number, source in enumerate(sources, start=1):
        text.append(f"\n{number}. ")
        text.append(source.label, style=f"link {source.uri} underline")
    return text


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped records from all scholarpro loggers.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.INFO, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Short logger name (session, gemini, player, ...)
            message: Log message, shown verbatim
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        level_color = level_colors.get(level, "white")

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[magenta]\\[{escape(component)}][/] {escape(message)}"
        )

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Log is empty", timeout=2)
            return
        self.app.copy_to_clipboard(text)
        self.app.notify("Log copied", timeout=2)


class TranscriptView(VerticalScroll):
    """Conversation history with user entries right-aligned."""

    BORDER_TITLE = "Transcript"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._shown = 0
        self._placeholder: str | None = None

    def show(
        self,
        entries: list[TranscriptionEntry],
        is_active: bool,
        pending: str = "",
    ) -> None:
        """Render entries, the empty-state placeholder and the current partial turn."""
        placeholder = transcript_placeholder(is_active, bool(entries))
        if len(entries) < self._shown or placeholder != self._placeholder:
            self.remove_children()
            self._shown = 0
            self._placeholder = placeholder
            if placeholder is not None:
                self.mount(Static(placeholder, classes="transcript-placeholder"))

        for entry in entries[self._shown:]:
            css = "user-entry" if entry.speaker is Speaker.USER else "model-entry"
            self.mount(Static(entry.text, classes=f"transcript-entry {css}"))
        self._shown = len(entries)

        self.border_subtitle = pending[-60:] if pending else ""
        self.scroll_end(animate=False)


class SourcesList(Static):
    """Citations under a search answer; hidden when there are none."""

    def show_sources(self, sources: list[Source]) -> None:
        text = format_sources(sources)
        self.display = text is not None
        self.update(text if text is not None else "")


class ChartView(Static):
    """Visualization section of a solution."""

    BORDER_TITLE = "Visualization"

    def show_chart(self, chart: ChartData | None) -> None:
        self.display = chart is not None
        if chart is None:
            self.update("")
            return
        self.border_subtitle = chart.type.value
        self.update(Group(build_chart(chart)))
