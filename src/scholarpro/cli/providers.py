"""Provider factory functions for CLI.

Centralizes creation of configuration and the AI provider from
environment variables. Hides configuration details from command
implementations.
"""

from rich.console import Console

from ..ai import AIProvider, create_ai_provider
from ..config import ScholarConfig, load_config
from ..errors import ConfigurationError

# Default console for output
_console = Console()


def get_config(console: Console | None = None) -> ScholarConfig:
    """Load configuration from the environment and .env file.

    Args:
        console: Optional Rich console for output

    Returns:
        Validated configuration

    Raises:
        SystemExit: If GEMINI_API_KEY / API_KEY is not set

    Environment variables:
        GEMINI_API_KEY: Gemini API key (API_KEY is accepted as well)
        SCHOLAR_*_MODEL / SCHOLAR_*_VOICE: Model and voice overrides
        SCHOLAR_LOG_LEVEL: Logging level (default: INFO)
    """
    import typer

    con = console or _console
    try:
        return load_config()
    except ConfigurationError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e


def get_provider(config: ScholarConfig) -> AIProvider:
    """Create the AI provider for a loaded configuration."""
    return create_ai_provider("gemini", **config.model_dump())
