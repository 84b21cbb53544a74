"""Unit tests for charts, formatting, widgets helpers and the Textual app."""
import logging
import threading
from types import SimpleNamespace

import pytest
from conftest import MicrophoneFactory, OutputFactory
from rich.console import Console

from scholarpro.ai.models import ChartData, ChartKind, ChartPoint, SolveResult
from scholarpro.ui import BarChart, DebugPanelHandler, LineChart, ScholarApp, build_chart
from scholarpro.ui.config import (
    TAB_LIVE,
    TAB_SEARCH,
    TAB_SOLVER,
    TRANSCRIPT_IDLE_PLACEHOLDER,
    TRANSCRIPT_LISTENING_PLACEHOLDER,
    LogLevel,
)
from scholarpro.ui.formatting import clean_latex
from scholarpro.ui.widgets import DebugPanel, SourcesList, transcript_placeholder


def points(*pairs):
    return [ChartPoint(name=name, value=value) for name, value in pairs]


def render_text(renderable, width: int = 80) -> str:
    console = Console(width=width, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestCharts:
    """Tests for terminal chart rendering."""

    def test_build_chart_matches_kind(self):
        """Test that the declared kind picks the renderer."""
        bar = ChartData(type=ChartKind.BAR, data=points(("a", 1)))
        line = ChartData(type="line", data=points(("a", 1)))

        assert isinstance(build_chart(bar), BarChart)
        assert isinstance(build_chart(line), LineChart)

    def test_bars_scaled_to_maximum(self):
        """Test proportional bar lengths."""
        chart = BarChart(points(("a", 10), ("b", 5), ("c", 0)), width=20)
        assert chart.bar_lengths() == [20, 10, 0]

    def test_negative_values_use_magnitude(self):
        """Test that negative values are scaled by absolute value."""
        chart = BarChart(points(("a", -4), ("b", 2)), width=8)
        assert chart.bar_lengths() == [8, 4]

    def test_all_zero_bars(self):
        """Test that an all-zero chart does not divide by zero."""
        assert BarChart(points(("a", 0), ("b", 0))).bar_lengths() == [0, 0]

    def test_bar_chart_shows_names_and_values(self):
        """Test rendered labels."""
        text = render_text(BarChart(points(("Mon", 3), ("Tue", 7.5))))

        assert "Mon" in text and "Tue" in text
        assert "7.5" in text

    def test_line_grid_places_extremes(self):
        """Test that the max is on the top row and the min on the bottom row."""
        chart = LineChart(points(("a", 1), ("b", 5), ("c", 3)), height=5)
        rows = chart.rows()
        col = chart.column_width

        assert len(rows) == 5
        assert rows[0][1 * col + col // 2] == "●"
        assert rows[-1][0 * col + col // 2] == "●"
        assert rows[2][2 * col + col // 2] == "●"

    def test_flat_line_is_centered(self):
        """Test a constant series."""
        rows = LineChart(points(("a", 2), ("b", 2)), height=5).rows()
        assert rows[2].count("●") == 2

    def test_line_chart_shows_axis_and_names(self):
        """Test rendered axis labels and point names."""
        text = render_text(LineChart(points(("Jan", 10), ("Feb", 20))))

        assert "Jan" in text and "Feb" in text
        assert "20" in text and "10" in text
        assert "└" in text


class TestFormatting:
    """Tests for LaTeX cleanup."""

    def test_inline_delimiters_removed(self):
        assert clean_latex(r"Solve \(x^2 = 4\)") == "Solve x^2 = 4"

    def test_dollar_math(self):
        assert clean_latex("Area is $\\pi r^2$") == "Area is π r^2"

    def test_fraction_and_sqrt(self):
        assert clean_latex(r"\frac{a}{b} + \sqrt{c}") == "(a)/(b) + √(c)"

    def test_longest_symbol_first(self):
        assert clean_latex(r"a \cdots b \cdot c") == "a … b · c"

    def test_braced_exponent(self):
        assert clean_latex("e^{i x}") == "e^(i x)"

    def test_left_right_delimiters(self):
        assert clean_latex(r"\left( \frac{1}{2} \right)") == "( (1)/(2) )"

    def test_rightarrow_not_split_by_right(self):
        assert clean_latex(r"x \rightarrow \infty") == "x → ∞"

    def test_currency_is_left_alone(self):
        """Test that dollar amounts are not mistaken for inline math."""
        assert clean_latex("It costs $5 and $10 total.") == "It costs $5 and $10 total."

    def test_single_symbol_math(self):
        assert clean_latex("Let $x$ be real") == "Let x be real"


class TestWidgetHelpers:
    """Tests for widget display rules."""

    def test_placeholder_when_idle(self):
        assert transcript_placeholder(False, False) == TRANSCRIPT_IDLE_PLACEHOLDER

    def test_placeholder_when_listening(self):
        assert transcript_placeholder(True, False) == TRANSCRIPT_LISTENING_PLACEHOLDER

    def test_no_placeholder_with_entries(self):
        assert transcript_placeholder(True, True) is None

    def test_log_level_from_record(self):
        assert LogLevel.from_record(logging.CRITICAL) == LogLevel.ERROR
        assert LogLevel.from_record(5) == LogLevel.DEBUG
        assert LogLevel.from_string("warning") == LogLevel.WARNING




class RecordingPanel:
    def __init__(self):
        self.lines = []

    def log(self, component, message, level):
        self.lines.append((component, message, level))


class TestDebugPanelHandler:
    """Tests for routing logging records into the log panel."""

    def make_handler(self, running=True):
        app = SimpleNamespace(_thread_id=threading.get_ident(), is_running=running)
        panel = RecordingPanel()
        return DebugPanelHandler(app, panel), panel

    def test_record_uses_short_logger_name(self):
        handler, panel = self.make_handler()
        logger = logging.getLogger("scholarpro.live.session")
        logger.addHandler(handler)
        try:
            logger.warning("mic %s", "lost")
        finally:
            logger.removeHandler(handler)

        assert panel.lines == [("session", "mic lost", LogLevel.WARNING)]

    def test_other_thread_goes_through_app(self):
        handler, panel = self.make_handler()
        handler.app._thread_id = -1
        calls = []
        handler.app.call_from_thread = lambda fn, *args: calls.append(args)

        handler.emit(logging.makeLogRecord({"name": "scholarpro.audio.player", "msg": "done", "levelno": logging.INFO}))

        assert calls == [("player", "done", LogLevel.INFO)]
        assert panel.lines == []

    def test_stopped_app_drops_foreign_records(self):
        handler, panel = self.make_handler(running=False)
        handler.app._thread_id = -1

        handler.emit(logging.makeLogRecord({"name": "x", "msg": "late", "levelno": logging.ERROR}))

        assert panel.lines == []


@pytest.fixture
def app(fake_provider):
    return ScholarApp(
        fake_provider,
        microphone_factory=MicrophoneFactory(),
        output_factory=OutputFactory(),
    )


class TestScholarApp:
    """Smoke tests for the Textual application."""

    @pytest.mark.asyncio
    async def test_starts_on_solver_tab(self, app):
        """Test the initial tab and header."""
        async with app.run_test() as pilot:
            await pilot.pause()
            assert app.query_one("#tabs").active == TAB_SOLVER
            assert app.title == "Scholar Pro"
            assert app.solver.player is not None

    @pytest.mark.asyncio
    async def test_function_keys_switch_tabs(self, app):
        """Test F1/F2/F3 bindings."""
        async with app.run_test() as pilot:
            await pilot.press("f2")
            assert app.query_one("#tabs").active == TAB_LIVE
            await pilot.press("f3")
            assert app.query_one("#tabs").active == TAB_SEARCH
            await pilot.press("f1")
            assert app.query_one("#tabs").active == TAB_SOLVER

    @pytest.mark.asyncio
    async def test_toggle_log_panel(self, app):
        """Test Ctrl+D shows and hides the log panel."""
        async with app.run_test() as pilot:
            panel = app.query_one("#debug-panel", DebugPanel)
            assert not panel.display
            await pilot.press("ctrl+d")
            assert panel.display
            await pilot.press("ctrl+d")
            assert not panel.display

    @pytest.mark.asyncio
    async def test_search_flow_lists_sources(self, app, fake_provider):
        """Test that a search renders the answer's sources."""
        async with app.run_test() as pilot:
            await pilot.press("f3")
            app.search.query = "photosynthesis"
            app.query_one("#search-panel")._submit()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert fake_provider.search_calls == ["photosynthesis"]
            assert app.query_one("#sources", SourcesList).display

    @pytest.mark.asyncio
    async def test_solver_result_shows_chart(self, app, fake_provider):
        """Test that a result with chart data shows the visualization."""
        fake_provider.solve_result = SolveResult(
            solution="s",
            explanation="e",
            chart_data=ChartData(type=ChartKind.BAR, data=points(("a", 1))),
        )
        async with app.run_test() as pilot:
            app.solver.prompt = "chart me"
            app.query_one("#solver-panel")._solve()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert app.query_one("#solver-result").display
            assert app.query_one("#chart").display

    @pytest.mark.asyncio
    async def test_unmount_stops_live_session(self, app):
        """Test that closing the app tears the live session down."""
        async with app.run_test() as pilot:
            await app.conversation.start()
            assert app.conversation.is_active
            await pilot.pause()

        assert not app.conversation.is_active
