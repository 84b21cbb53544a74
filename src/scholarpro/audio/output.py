"""Audio output context.

Hidden design decisions:
- Sample-accurate mixing of scheduled sources into one output stream
- The playback clock (frames rendered, not wall time)
- When the sounddevice stream is opened and how device errors surface
- Which thread runs "ended" callbacks
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

import numpy as np
from numpy.typing import NDArray

from ..errors import AudioOutputError
from .models import AudioBuffer

logger = logging.getLogger(__name__)

Dispatcher = Callable[..., Any]


class AudioSource:
    """A buffer scheduled for playback on an OutputContext.

    Each source can be started once. Stopping is idempotent and fires
    ``on_ended`` the same way natural completion does.
    """

    def __init__(self, context: "OutputContext", buffer: AudioBuffer) -> None:
        self._context = context
        self.buffer = buffer
        self.on_ended: Callable[["AudioSource"], None] | None = None
        self._start_frame: int | None = None
        self._ended = False

    @property
    def started(self) -> bool:
        return self._start_frame is not None

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def start_time(self) -> float | None:
        """Scheduled start in context seconds, None until started."""
        if self._start_frame is None:
            return None
        return self._start_frame / self._context.sample_rate

    def start(self, when: float = 0.0) -> None:
        """Schedule playback at context time ``when`` (seconds).

        A time in the past means "now".

        Raises:
            RuntimeError: If the source was already started
        """
        if self._start_frame is not None:
            raise RuntimeError("AudioSource can only be started once")
        self._context._start_source(self, when)

    def stop(self) -> None:
        """Stop playback. Safe to call at any time, any number of times."""
        self._context._stop_source(self)


class OutputContext:
    """Mixes scheduled AudioSources into a single output stream.

    The clock (``current_time``) advances only as frames are rendered, so
    scheduling against it stays gapless regardless of network jitter.

    Args:
        sample_rate: Output sample rate in Hz
        channels: Output channel count
        block_size: Frames per output callback
        open_stream: Open a sounddevice stream on first start. Pass False
            to drive ``render`` manually (headless use and tests).
        dispatch: Function used to run ended-callbacks, e.g.
            ``loop.call_soon_threadsafe``. Defaults to calling inline on
            the audio thread.
    """

    def __init__(
        self,
        sample_rate: int,
        channels: int = 1,
        block_size: int = 1024,
        open_stream: bool = True,
        dispatch: Dispatcher | None = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self._block_size = block_size
        self._open_stream = open_stream
        self._dispatch = dispatch
        self._lock = threading.Lock()
        self._active: list[AudioSource] = []
        self._frame_position = 0
        self._stream: Any | None = None
        self._closed = False

    @property
    def current_time(self) -> float:
        """Seconds of audio rendered since the context was created."""
        with self._lock:
            return self._frame_position / self.sample_rate

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active_sources(self) -> list[AudioSource]:
        """Sources started and not yet ended."""
        with self._lock:
            return list(self._active)

    def create_source(self, buffer: AudioBuffer) -> AudioSource:
        """Create an unstarted source for ``buffer``."""
        if buffer.sample_rate != self.sample_rate:
            logger.warning(
                "Buffer sample rate %d differs from context rate %d",
                buffer.sample_rate, self.sample_rate
            )
        return AudioSource(self, buffer)

    def _start_source(self, source: AudioSource, when: float) -> None:
        if self._closed:
            raise RuntimeError("OutputContext is closed")

        with self._lock:
            requested = int(round(max(when, 0.0) * self.sample_rate))
            source._start_frame = max(requested, self._frame_position)
            self._active.append(source)

        if self._open_stream:
            try:
                self._ensure_stream()
            except AudioOutputError:
                with self._lock:
                    source._ended = True
                    self._active.remove(source)
                raise

    def _stop_source(self, source: AudioSource) -> None:
        with self._lock:
            if source._ended:
                return
            source._ended = True
            if source in self._active:
                self._active.remove(source)
        self._notify_ended(source)

    def _notify_ended(self, source: AudioSource) -> None:
        callback = source.on_ended
        if callback is None:
            return
        if self._dispatch is not None:
            try:
                self._dispatch(callback, source)
                return
            except RuntimeError:
                # Event loop already closed; run inline
                pass
        callback(source)

    def render(self, frames: int) -> NDArray[np.float32]:
        """Mix the next ``frames`` frames and advance the clock.

        Called from the sounddevice callback; also usable directly when
        the context was created with ``open_stream=False``.
        """
        out = np.zeros((frames, self.channels), dtype=np.float32)
        finished: list[AudioSource] = []

        with self._lock:
            if self._closed:
                return out

            block_start = self._frame_position
            block_end = block_start + frames

            for source in self._active:
                src_start = source._start_frame or 0
                src_end = src_start + source.buffer.length
                if src_start >= block_end:
                    continue
                if src_end > block_start:
                    lo = max(src_start, block_start)
                    hi = min(src_end, block_end)
                    chunk = source.buffer.samples[lo - src_start:hi - src_start]
                    if chunk.shape[1] != self.channels:
                        chunk = np.repeat(chunk[:, :1], self.channels, axis=1)
                    out[lo - block_start:hi - block_start] += chunk
                if src_end <= block_end:
                    finished.append(source)

            for source in finished:
                source._ended = True
                self._active.remove(source)

            self._frame_position = block_end

        for source in finished:
            self._notify_ended(source)

        np.clip(out, -1.0, 1.0, out=out)
        return out

    def _callback(self, outdata: Any, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("Output stream status: %s", status)
        outdata[:] = self.render(frames)

    def _ensure_stream(self) -> None:
        if self._stream is not None or self._closed:
            return
        try:
            import sounddevice as sd
        except OSError as e:
            raise AudioOutputError(f"PortAudio is not available: {e}") from e

        try:
            stream = sd.OutputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="float32",
                blocksize=self._block_size,
                callback=self._callback,
            )
            stream.start()
        except (sd.PortAudioError, ValueError) as e:
            raise AudioOutputError(f"Could not open audio output: {e}") from e

        self._stream = stream
        logger.debug("Output stream opened at %d Hz", self.sample_rate)

    def close(self) -> None:
        """Stop all sources and release the output device. Idempotent."""
        if self._closed:
            return

        for source in self.active_sources:
            source.stop()

        with self._lock:
            self._closed = True
            stream, self._stream = self._stream, None

        if stream is not None:
            try:
                stream.stop()
            finally:
                stream.close()
            logger.debug("Output stream closed")
