"""Main CLI application using Typer."""
import asyncio
import time
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..audio import AudioPlayer, OutputContext
from ..config import ScholarConfig
from ..live import LiveConversation, SessionState, Speaker
from ..logging_config import setup_logging
from ..search import WebSearch
from ..solver import ExerciseSolver
from ..ui.charts import build_chart
from ..ui.formatting import render_markdown
from .providers import get_config, get_provider

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="scholarpro",
    help="AI-powered academic assistant: exercise solver, live voice tutor and web search",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _create_player(provider, config: ScholarConfig) -> AudioPlayer:
    loop = asyncio.get_running_loop()
    context = OutputContext(config.output_sample_rate, dispatch=loop.call_soon_threadsafe)
    return AudioPlayer(provider, context, sample_rate=config.output_sample_rate)


async def _play_to_end(player: AudioPlayer) -> None:
    """Play the player's text and wait until playback ends."""
    try:
        with console.status("[dim]Generating speech...[/dim]"):
            await player.play()
        while player.is_playing:
            await asyncio.sleep(0.1)
    finally:
        player.close()


@app.command("tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive terminal interface."""
    async def _tui():
        from ..ui import run_textual_tui

        config = get_config(console)
        setup_logging(log_level or config.log_level, console=False)
        provider = get_provider(config)
        await run_textual_tui(provider, config=config, log_level=log_level)

    asyncio.run(_tui())


@app.command()
def solve(
    prompt: str = typer.Argument(
        "",
        help="Problem description (may be empty when --image is given)"
    ),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        help="Image of the problem"
    ),
    thinking: bool = typer.Option(
        False,
        "--thinking",
        "-t",
        help="Use the extended reasoning model"
    ),
    speak: bool = typer.Option(
        False,
        "--speak",
        help="Read the key concept aloud"
    ),
):
    """Solve an exercise and show a step-by-step solution."""
    async def _solve():
        config = get_config(console)
        setup_logging(config.log_level)

        async with get_provider(config) as provider:
            solver = ExerciseSolver(provider)
            solver.prompt = prompt
            solver.thinking_mode = thinking
            if image is not None:
                solver.set_image_path(image)
                if solver.error:
                    console.print(f"[red]Error: {solver.error}[/red]")
                    raise typer.Exit(code=1)
            if speak:
                solver.player = _create_player(provider, config)

            mode = "thinking" if thinking else "standard"
            with console.status(f"[dim]Solving ({mode})...[/dim]"):
                result = await solver.submit()

            if result is None:
                if solver.player is not None:
                    solver.player.close()
                console.print(f"[red]Error: {solver.error}[/red]")
                raise typer.Exit(code=1)

            console.print(Panel(render_markdown(result.solution), title="Solution", border_style="blue"))
            console.print(Panel(render_markdown(result.explanation), title="Key Concept", border_style="magenta"))
            if result.chart_data is not None:
                console.print(Panel(
                    build_chart(result.chart_data),
                    title=f"Visualization ({result.chart_data.type.value})",
                    border_style="yellow"
                ))

            if solver.player is not None:
                await _play_to_end(solver.player)

    asyncio.run(_solve())


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query")
):
    """Answer a question using Google Search grounding."""
    async def _search():
        config = get_config(console)
        setup_logging(config.log_level)

        async with get_provider(config) as provider:
            web = WebSearch(provider)
            web.query = query
            with console.status("[dim]Searching...[/dim]"):
                result = await web.submit()

            if result is None:
                console.print(f"[red]Error: {web.error}[/red]")
                raise typer.Exit(code=1)

            console.print(render_markdown(result.answer))

            if web.show_sources:
                table = Table(title="Sources", title_justify="left")
                table.add_column("#", style="dim", justify="right")
                table.add_column("Title", style="cyan")
                table.add_column("URI", style="blue")
                for number, source in enumerate(result.sources, start=1):
                    table.add_row(str(number), source.label, source.uri)
                console.print()
                console.print(table)

    asyncio.run(_search())


@app.command()
def speak(
    text: str = typer.Argument(..., help="Text to read aloud")
):
    """Synthesize speech for TEXT and play it."""
    async def _speak():
        config = get_config(console)
        setup_logging(config.log_level)

        async with get_provider(config) as provider:
            player = _create_player(provider, config)
            player.set_text(text)
            await _play_to_end(player)

    asyncio.run(_speak())


@app.command()
def live(
    seconds: float | None = typer.Option(
        None,
        "--seconds",
        "-s",
        help="Stop automatically after this many seconds"
    ),
):
    """Talk with the tutor using your microphone."""
    async def _live():
        config = get_config(console)
        setup_logging(config.log_level)

        async with get_provider(config) as provider:
            conversation = LiveConversation(
                provider,
                input_sample_rate=config.input_sample_rate,
                output_sample_rate=config.output_sample_rate,
                block_size=config.capture_block_size,
            )
            printed = 0

            def print_entries() -> None:
                nonlocal printed
                entries = conversation.entries
                for entry in entries[printed:]:
                    if entry.speaker is Speaker.USER:
                        console.print(f"[bold blue]You:[/bold blue] {entry.text}")
                    else:
                        console.print(f"[bold magenta]Tutor:[/bold magenta] {entry.text}")
                printed = len(entries)

            conversation.on_change = print_entries

            with console.status("[dim]Connecting...[/dim]"):
                await conversation.start()
            if conversation.state is not SessionState.ACTIVE:
                console.print(f"[red]Error: {conversation.error}[/red]")
                raise typer.Exit(code=1)

            console.print("[green]Listening... press Ctrl+C to stop[/green]")
            started = time.monotonic()
            try:
                while conversation.is_active:
                    if seconds is not None and time.monotonic() - started >= seconds:
                        break
                    await asyncio.sleep(0.2)
            finally:
                await conversation.stop()

            if conversation.error:
                console.print(f"[red]Error: {conversation.error}[/red]")
                raise typer.Exit(code=1)
            console.print("[dim]Conversation ended.[/dim]")

    try:
        asyncio.run(_live())
    except KeyboardInterrupt:
        console.print("\n[dim]Conversation ended.[/dim]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
