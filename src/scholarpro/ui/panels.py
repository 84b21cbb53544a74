"""Tab panels.

Each panel renders the state of one controller and forwards user
actions to it. The panels own no request logic; validation, error
messages and the in-flight guard live in the controllers.
"""

from textual import work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Checkbox, Input, Label, Markdown, Static, TextArea

from ..ai.models import SearchResult, SolveResult
from ..live.models import SessionState
from ..live.session import LiveConversation
from ..search.controller import WebSearch
from ..solver.controller import ExerciseSolver
from .config import (
    AUDIO_LOADING_LABEL,
    CONNECTING_LABEL,
    PAUSE_LABEL,
    PLAY_LABEL,
    SOLVE_BUTTON_BUSY_LABEL,
    SOLVE_BUTTON_LABEL,
    START_LABEL,
    STOP_LABEL,
)
from .formatting import clean_latex
from .widgets import ChartView, SourcesList, TranscriptView


def _show_error(widget: Static, message: str | None) -> None:
    widget.update(message or "")
    widget.display = bool(message)


class SolverPanel(Vertical):
    """Exercise solver: prompt, optional image, thinking mode, result."""

    def __init__(self, solver: ExerciseSolver, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.solver = solver
        self._shown_result: SolveResult | None = None

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="solver-scroll"):
            yield Label("Describe the problem", classes="field-label")
            yield TextArea(id="solver-prompt")
            with Horizontal(id="image-row"):
                yield Input(placeholder="Path to an image of the problem (optional)", id="image-path")
                yield Button("Attach", id="attach-image")
                yield Button("Clear", id="clear-image")
            yield Static(id="image-status")
            with Horizontal(id="solver-actions"):
                yield Checkbox("Thinking Mode", id="thinking-mode")
                yield Button(SOLVE_BUTTON_LABEL, id="solve", variant="primary")
            yield Static(id="solver-error", classes="error-line")
            with Vertical(id="solver-result"):
                yield Label("Solution", classes="section-title")
                yield Markdown(id="solution")
                yield Label("Key Concept", classes="section-title")
                yield Markdown(id="explanation")
                yield Button(PLAY_LABEL, id="toggle-audio")
                yield ChartView(id="chart")

    def on_mount(self) -> None:
        self.solver.on_change = self.refresh_view
        self.refresh_view()

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        solver = self.solver

        solve = self.query_one("#solve", Button)
        solve.disabled = solver.is_loading
        solve.label = SOLVE_BUTTON_BUSY_LABEL if solver.is_loading else SOLVE_BUTTON_LABEL

        image_status = self.query_one("#image-status", Static)
        image_status.update(f"Attached: {solver.image.name}" if solver.image else "")
        image_status.display = solver.image is not None

        _show_error(self.query_one("#solver-error", Static), solver.error)

        result_box = self.query_one("#solver-result", Vertical)
        result_box.display = solver.result is not None
        if solver.result is not self._shown_result:
            self._shown_result = solver.result
            if solver.result is not None:
                self.query_one("#solution", Markdown).update(clean_latex(solver.result.solution))
                self.query_one("#explanation", Markdown).update(clean_latex(solver.result.explanation))
                self.query_one("#chart", ChartView).show_chart(solver.result.chart_data)

        audio = self.query_one("#toggle-audio", Button)
        player = solver.player
        audio.display = player is not None
        if player is not None:
            audio.disabled = player.is_loading
            if player.is_loading:
                audio.label = AUDIO_LOADING_LABEL
            elif player.is_playing:
                audio.label = PAUSE_LABEL
            else:
                audio.label = PLAY_LABEL

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.solver.prompt = event.text_area.text

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        self.solver.thinking_mode = event.value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "image-path":
            self._attach_image()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "solve":
            if not self.solver.is_loading:
                self._solve()
        elif button_id == "attach-image":
            self._attach_image()
        elif button_id == "clear-image":
            self.query_one("#image-path", Input).value = ""
            self.solver.clear_image()
        elif button_id == "toggle-audio":
            self._toggle_audio()

    def _attach_image(self) -> None:
        path = self.query_one("#image-path", Input).value.strip()
        if path:
            self.solver.set_image_path(path)

    @work(exclusive=True, group="solver")
    async def _solve(self) -> None:
        result = await self.solver.submit()
        if result is not None:
            self.app.notify("Solution ready", timeout=2)

    @work(exclusive=True, group="solver-audio")
    async def _toggle_audio(self) -> None:
        await self.solver.toggle_audio()


class LivePanel(Vertical):
    """Live voice conversation controls and transcript."""

    def __init__(self, conversation: LiveConversation, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.conversation = conversation

    def compose(self) -> ComposeResult:
        with Horizontal(id="live-controls"):
            yield Button(START_LABEL, id="start-live", variant="success")
            yield Button(STOP_LABEL, id="stop-live", variant="error")
        yield Static(id="live-error", classes="error-line")
        yield TranscriptView(id="transcript")

    def on_mount(self) -> None:
        self.conversation.on_change = self.refresh_view
        self.refresh_view()

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        conversation = self.conversation
        state = conversation.state

        start = self.query_one("#start-live", Button)
        start.display = state is not SessionState.ACTIVE
        start.disabled = state is not SessionState.IDLE
        start.label = CONNECTING_LABEL if state is SessionState.CONNECTING else START_LABEL
        self.query_one("#stop-live", Button).display = state is SessionState.ACTIVE

        _show_error(self.query_one("#live-error", Static), conversation.error)

        pending = conversation.pending_output or conversation.pending_input
        self.query_one("#transcript", TranscriptView).show(
            conversation.entries,
            conversation.is_active,
            pending,
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "start-live":
            self._start()
        elif event.button.id == "stop-live":
            self._stop()

    @work(exclusive=True, group="live-start")
    async def _start(self) -> None:
        await self.conversation.start()

    @work(exclusive=True, group="live-stop")
    async def _stop(self) -> None:
        await self.conversation.stop()


class SearchPanel(Vertical):
    """Web-grounded search with cited sources."""

    def __init__(self, search: WebSearch, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.search = search
        self._shown_result: SearchResult | None = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="search-bar"):
            yield Input(placeholder="Ask anything...", id="search-query")
            yield Button("Search", id="search", variant="primary")
        yield Static(id="search-error", classes="error-line")
        with VerticalScroll(id="search-result"):
            yield Markdown(id="search-answer")
            yield SourcesList(id="sources")

    def on_mount(self) -> None:
        self.search.on_change = self.refresh_view
        self.refresh_view()

    def refresh_view(self) -> None:
        if not self.is_mounted:
            return
        search = self.search

        button = self.query_one("#search", Button)
        button.disabled = search.is_loading
        button.label = "Searching..." if search.is_loading else "Search"

        _show_error(self.query_one("#search-error", Static), search.error)

        result_box = self.query_one("#search-result", VerticalScroll)
        result_box.display = search.result is not None
        if search.result is not self._shown_result:
            self._shown_result = search.result
            if search.result is not None:
                self.query_one("#search-answer", Markdown).update(search.result.answer)
                self.query_one("#sources", SourcesList).show_sources(search.result.sources)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "search-query":
            self.search.query = event.value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search-query":
            self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "search":
            self._submit()

    def _submit(self) -> None:
        if not self.search.is_loading:
            self._search()

    @work(exclusive=True, group="search")
    async def _search(self) -> None:
        await self.search.submit()
