"""Transcript accumulation.

Hides how streamed transcription deltas are buffered per speaker and
turned into history entries when a turn completes.
"""

from .models import Speaker, TranscriptionEntry


class TranscriptAccumulator:
    """Collects input/output transcription deltas for the current turn.

    Example:
        acc = TranscriptAccumulator()
        acc.add_input("What is ")
        acc.add_input("entropy?")
        acc.add_output("Entropy measures...")
        acc.complete_turn()   # user entry, then model entry
    """

    def __init__(self) -> None:
        self._input: list[str] = []
        self._output: list[str] = []
        self._history: list[TranscriptionEntry] = []

    @property
    def history(self) -> list[TranscriptionEntry]:
        """Completed entries, oldest first."""
        return list(self._history)

    @property
    def pending_input(self) -> str:
        return "".join(self._input)

    @property
    def pending_output(self) -> str:
        return "".join(self._output)

    def add_input(self, text: str) -> None:
        self._input.append(text)

    def add_output(self, text: str) -> None:
        self._output.append(text)

    def complete_turn(self) -> list[TranscriptionEntry]:
        """Flush both buffers into the history.

        The user entry comes first, then the model entry; either is
        skipped when its trimmed text is empty. Both buffers reset.

        Returns:
            The entries appended by this call
        """
        added = []
        for speaker, text in (
            (Speaker.USER, self.pending_input.strip()),
            (Speaker.MODEL, self.pending_output.strip()),
        ):
            if text:
                added.append(TranscriptionEntry(speaker=speaker, text=text))

        self._history.extend(added)
        self.reset_buffers()
        return added

    def reset_buffers(self) -> None:
        self._input.clear()
        self._output.clear()

    def clear(self) -> None:
        """Drop the history and both buffers."""
        self._history.clear()
        self.reset_buffers()
