"""Bridge from the standard logging module to the DebugPanel.

Records may be emitted from PortAudio callback threads or SDK threads;
they are marshalled onto the app thread before touching the widget.
"""

import logging
import threading
from typing import TYPE_CHECKING

from .config import LogLevel

if TYPE_CHECKING:
    from textual.app import App

    from .widgets import DebugPanel


class DebugPanelHandler(logging.Handler):
    """logging.Handler that writes records into a DebugPanel."""

    def __init__(self, app: "App", panel: "DebugPanel", level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.app = app
        self.panel = panel
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return

        component = record.name.rsplit(".", 1)[-1]
        level = LogLevel.from_record(record.levelno)

        if self.app._thread_id == threading.get_ident():
            self.panel.log(component, message, level)
        elif self.app.is_running:
            try:
                self.app.call_from_thread(self.panel.log, component, message, level)
            except RuntimeError:
                # App shut down between the check and the call
                pass
