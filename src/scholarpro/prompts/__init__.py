"""Tutor and speech prompts.

The text lives in ``solver.txt`` and ``speech.txt`` next to this module.
Setting ``SCHOLAR_PROMPTS_DIR`` points the loader at a directory of
replacement files; a missing override falls back to the bundled text.
"""

import os
from functools import lru_cache
from pathlib import Path

_BUNDLED_DIR = Path(__file__).parent
PROMPTS_DIR_ENV = "SCHOLAR_PROMPTS_DIR"


def _candidates(filename: str) -> list[Path]:
    paths = []
    override = os.getenv(PROMPTS_DIR_ENV)
    if override:
        paths.append(Path(override).expanduser() / filename)
    paths.append(_BUNDLED_DIR / filename)
    return paths


@lru_cache(maxsize=8)
def load_prompt(name: str) -> str:
    """Read prompt ``name`` (no extension), trailing whitespace stripped.

    Raises:
        FileNotFoundError: Neither the override directory nor the package has it
    """
    paths = _candidates(f"{name}.txt")
    for path in paths:
        if path.is_file():
            return path.read_text(encoding="utf-8").rstrip()

    searched = "".join(f"\n  - {path}" for path in paths)
    raise FileNotFoundError(f"Prompt '{name}' not found. Searched:{searched}")


def get_solver_instruction() -> str:
    """System instruction for the exercise solver."""
    return load_prompt("solver")


def format_speech_prompt(text: str) -> str:
    """Wrap an utterance in the speech-synthesis instruction."""
    return load_prompt("speech").format(text=text)


def clear_cache() -> None:
    """Forget loaded prompts so a changed override directory is re-read."""
    load_prompt.cache_clear()


__all__ = [
    "PROMPTS_DIR_ENV",
    "clear_cache",
    "format_speech_prompt",
    "get_solver_instruction",
    "load_prompt",
]
