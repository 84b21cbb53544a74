"""Main Textual TUI application.

Orchestrates the three tab panels and owns the resources they share:
the provider, the explanation audio player and the live session.
"""

import asyncio
import contextlib
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, TabbedContent, TabPane

from ..ai.base import AIProvider
from ..audio.output import OutputContext
from ..audio.player import AudioPlayer
from ..config import OUTPUT_SAMPLE_RATE, ScholarConfig
from ..live.session import LiveConversation, MicrophoneFactory, OutputFactory
from ..search.controller import WebSearch
from ..solver.controller import ExerciseSolver
from .config import (
    APP_SUBTITLE,
    APP_TITLE,
    TAB_LABELS,
    TAB_LIVE,
    TAB_SEARCH,
    TAB_SOLVER,
    LogLevel,
)
from .log_handler import DebugPanelHandler
from .panels import LivePanel, SearchPanel, SolverPanel
from .styles import APP_CSS
from .themes import SCHOLAR_NIGHT
from .widgets import DebugPanel

logger = logging.getLogger(__name__)


class ScholarApp(App):
    """Textual TUI with solver, live conversation and search tabs."""

    CSS = APP_CSS
    TITLE = APP_TITLE
    SUB_TITLE = APP_SUBTITLE

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+d", "toggle_debug", "Log", priority=True),
        Binding("f1", f"show_tab('{TAB_SOLVER}')", "Solver", priority=True),
        Binding("f2", f"show_tab('{TAB_LIVE}')", "Live", priority=True),
        Binding("f3", f"show_tab('{TAB_SEARCH}')", "Search", priority=True),
    ]

    def __init__(
        self,
        provider: AIProvider,
        config: ScholarConfig | None = None,
        log_level: str | None = None,
        microphone_factory: MicrophoneFactory | None = None,
        output_factory: OutputFactory | None = None,
    ) -> None:
        super().__init__()
        self._provider = provider
        self._config = config
        self._log_level = log_level
        self._output_factory = output_factory
        self._log_handler: DebugPanelHandler | None = None

        live_kwargs = {}
        if config is not None:
            live_kwargs = {
                "input_sample_rate": config.input_sample_rate,
                "output_sample_rate": config.output_sample_rate,
                "block_size": config.capture_block_size,
            }
        self.solver = ExerciseSolver(provider)
        self.search = WebSearch(provider)
        self.conversation = LiveConversation(
            provider,
            microphone_factory=microphone_factory,
            output_factory=output_factory,
            **live_kwargs,
        )

    @property
    def output_sample_rate(self) -> int:
        return self._config.output_sample_rate if self._config else OUTPUT_SAMPLE_RATE

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with TabbedContent(initial=TAB_SOLVER, id="tabs"):
            with TabPane(TAB_LABELS[TAB_SOLVER], id=TAB_SOLVER):
                yield SolverPanel(self.solver, id="solver-panel")
            with TabPane(TAB_LABELS[TAB_LIVE], id=TAB_LIVE):
                yield LivePanel(self.conversation, id="live-panel")
            with TabPane(TAB_LABELS[TAB_SEARCH], id=TAB_SEARCH):
                yield SearchPanel(self.search, id="search-panel")
        yield DebugPanel(id="debug-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(SCHOLAR_NIGHT)
        self.theme = "scholar-night"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
        self._log_handler = DebugPanelHandler(self, log_panel)
        logging.getLogger().addHandler(self._log_handler)
        logger.info("Log panel attached (level %s)", LogLevel.name(log_panel.log_level))

        loop = asyncio.get_running_loop()
        if self._output_factory is not None:
            context = self._output_factory(loop.call_soon_threadsafe)
        else:
            context = OutputContext(self.output_sample_rate, dispatch=loop.call_soon_threadsafe)
        solver_panel = self.query_one("#solver-panel", SolverPanel)
        self.solver.player = AudioPlayer(
            self._provider,
            context,
            sample_rate=self.output_sample_rate,
            on_change=solver_panel.refresh_view,
        )
        solver_panel.refresh_view()
        self.query_one("#solver-prompt").focus()

    async def on_unmount(self) -> None:
        """Stop the live session and release audio devices."""
        with contextlib.suppress(Exception):
            await self.conversation.stop()
        if self.solver.player is not None:
            self.solver.player.close()
        if self._log_handler is not None:
            logging.getLogger().removeHandler(self._log_handler)
            self._log_handler = None

    def action_show_tab(self, tab: str) -> None:
        """Switch to the tab with the given id."""
        self.query_one("#tabs", TabbedContent).active = tab

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)


async def run_textual_tui(
    provider: AIProvider,
    config: ScholarConfig | None = None,
    log_level: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        provider: AI provider instance
        config: Settings used for audio sample rates and block size
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = ScholarApp(provider=provider, config=config, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(BaseException):
            await app.conversation.stop()
        await provider.close()
