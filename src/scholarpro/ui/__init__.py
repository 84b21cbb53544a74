"""Terminal UI module for scholarpro.

Provides a Textual-based TUI with three tabs: exercise solver, live
conversation and web search.

Module structure (each module hides a design decision):
- config.py: Labels, ids and display limits
- themes.py: Color palette
- styles.py: CSS layout
- formatting.py: Markdown and LaTeX cleanup
- charts.py: Terminal bar and line charts
- widgets.py: Log panel, transcript, sources and chart widgets
- log_handler.py: Routing of logging records into the log panel
- panels.py: One panel per tab, rendering controller state
- app.py: Application orchestration and resource ownership
"""

from .app import ScholarApp, run_textual_tui
from .charts import BarChart, LineChart, build_chart
from .config import LogLevel
from .log_handler import DebugPanelHandler
from .panels import LivePanel, SearchPanel, SolverPanel
from .widgets import ChartView, DebugPanel, SourcesList, TranscriptView

__all__ = [
    "BarChart",
    "ChartView",
    "DebugPanel",
    "DebugPanelHandler",
    "LineChart",
    "LivePanel",
    "LogLevel",
    "ScholarApp",
    "SearchPanel",
    "SolverPanel",
    "SourcesList",
    "TranscriptView",
    "build_chart",
    "run_textual_tui",
]
