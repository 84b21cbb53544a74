"""On-demand speech playback.

Hidden design decisions:
- When speech is fetched (lazily, on first play)
- Caching of the decoded buffer per utterance
- How playback end is reported back to the UI
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import AudioOutputError
from .codec import decode, decode_audio_data
from .models import AudioBuffer
from .output import AudioSource, OutputContext

if TYPE_CHECKING:
    from ..ai.base import AIProvider

logger = logging.getLogger(__name__)


class AudioPlayer:
    """Fetches, decodes and plays one synthesized utterance at a time.

    The decoded buffer is cached so replaying does not call the
    provider again; changing the text drops the cache.

    Example:
        player = AudioPlayer(provider, context)
        player.set_text(result.explanation)
        await player.play()   # fetches and plays
        player.pause()
        await player.play()   # replays from cache
    """

    def __init__(
        self,
        provider: "AIProvider",
        context: OutputContext,
        sample_rate: int = 24000,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._provider = provider
        self._context = context
        self._sample_rate = sample_rate
        self._on_change = on_change
        self._text: str | None = None
        self._text_version = 0
        self._buffer: AudioBuffer | None = None
        self._source: AudioSource | None = None
        self._is_playing = False
        self._is_loading = False

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def text(self) -> str | None:
        return self._text

    @property
    def has_cached_audio(self) -> bool:
        return self._buffer is not None

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def set_text(self, text: str) -> None:
        """Replace the utterance, stopping playback and dropping the cache."""
        self.pause()
        self._buffer = None
        self._text = text
        self._text_version += 1

    async def play(self) -> None:
        """Play the current text, fetching speech on first use.

        Does nothing without text or while a fetch is in flight. Fetch and
        decode failures are logged and leave the player idle.
        """
        if not self._text or self._is_loading:
            return

        if self._buffer is None:
            version = self._text_version
            self._is_loading = True
            self._changed()
            try:
                audio_b64 = await self._provider.generate_speech(self._text)
                buffer = decode_audio_data(decode(audio_b64), self._sample_rate, 1)
            except Exception:
                logger.exception("Failed to fetch speech audio")
                return
            finally:
                self._is_loading = False
                self._changed()

            if version != self._text_version:
                logger.debug("Text changed during speech fetch; discarding audio")
                return
            self._buffer = buffer

        self._start_buffer(self._buffer)

    def _start_buffer(self, buffer: AudioBuffer) -> None:
        self.pause()
        source = self._context.create_source(buffer)
        source.on_ended = self._handle_ended
        self._source = source
        self._is_playing = True
        try:
            source.start(0)
        except (AudioOutputError, RuntimeError):
            self._source = None
            self._is_playing = False
            logger.exception("Failed to start playback")
        self._changed()

    def _handle_ended(self, source: AudioSource) -> None:
        if source is self._source:
            self._source = None
            self._is_playing = False
            self._changed()

    def pause(self) -> None:
        """Stop the current playback, if any."""
        source, self._source = self._source, None
        if source is not None:
            source.stop()
            self._is_playing = False
            self._changed()

    def close(self) -> None:
        """Stop playback and release the output context."""
        self.pause()
        self._context.close()
