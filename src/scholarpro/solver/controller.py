"""Exercise solver controller.

Hides the panel rules for solving: input validation, the single
in-flight request, error messages, and handing the explanation to the
audio player. Contains no UI code.
"""

import logging
from collections.abc import Callable
from pathlib import Path

from ..ai.base import AIProvider
from ..ai.models import ImageInput, SolveResult
from ..audio.player import AudioPlayer
from ..errors import InputValidationError

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please provide a problem description or an image."
SOLVE_ERROR_MESSAGE = "An error occurred while solving the problem. Please try again."


class ExerciseSolver:
    """State and actions behind the exercise solver panel.

    Example:
        solver = ExerciseSolver(provider, player)
        solver.prompt = "Integrate x^2 from 0 to 3"
        solver.thinking_mode = True
        await solver.submit()
        print(solver.result.solution)
    """

    def __init__(
        self,
        provider: AIProvider,
        player: AudioPlayer | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._provider = provider
        self.player = player
        self.on_change = on_change
        self.prompt = ""
        self.image: ImageInput | None = None
        self.thinking_mode = False
        self.result: SolveResult | None = None
        self.error: str | None = None
        self.is_loading = False

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def set_image_path(self, path: str | Path) -> None:
        """Attach an image from disk, or report why it was rejected."""
        try:
            self.image = ImageInput.from_path(path)
        except InputValidationError as e:
            logger.warning("Image rejected: %s", e)
            self.error = str(e)
        else:
            self.error = None
        self._changed()

    def clear_image(self) -> None:
        self.image = None
        self._changed()

    async def submit(self) -> SolveResult | None:
        """Solve the current prompt/image.

        Returns:
            The new result, or None when validation failed, a request was
            already in flight, or the request failed
        """
        if self.is_loading:
            return None

        if not self.prompt.strip() and self.image is None:
            self.error = EMPTY_INPUT_MESSAGE
            self._changed()
            return None

        self.is_loading = True
        self.error = None
        self.result = None
        self._changed()

        try:
            result = await self._provider.solve_exercise(
                self.prompt,
                image=self.image,
                thinking_mode=self.thinking_mode
            )
        except Exception:
            logger.exception("Solve request failed")
            self.error = SOLVE_ERROR_MESSAGE
            return None
        else:
            self.result = result
            if self.player is not None:
                self.player.set_text(result.explanation)
            return result
        finally:
            self.is_loading = False
            self._changed()

    async def toggle_audio(self) -> None:
        """Pause the explanation audio if playing, otherwise play it."""
        if self.player is None:
            return
        if self.player.is_playing:
            self.player.pause()
        else:
            await self.player.play()
