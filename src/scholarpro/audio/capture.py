"""Microphone capture.

Hides the sounddevice InputStream setup and how device failures are
reported. Each captured block is handed to a callback as a mono
float32 array; the callback runs on the PortAudio thread.
"""

import logging
from collections.abc import Callable
from typing import Any

import numpy as np
from numpy.typing import NDArray

from ..errors import MicrophoneError

logger = logging.getLogger(__name__)

FrameCallback = Callable[[NDArray[np.float32]], None]


class MicrophoneStream:
    """Fixed-block-size mono microphone stream.

    Lifecycle: ``open()`` acquires the device, ``start()`` begins
    delivering frames, ``close()`` releases it. ``stop`` and ``close``
    are idempotent.
    """

    def __init__(
        self,
        on_frame: FrameCallback,
        sample_rate: int = 16000,
        block_size: int = 4096,
        device: int | str | None = None,
    ) -> None:
        self._on_frame = on_frame
        self.sample_rate = sample_rate
        self.block_size = block_size
        self._device = device
        self._stream: Any | None = None
        self._running = False

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    @property
    def running(self) -> bool:
        return self._running

    def open(self) -> None:
        """Acquire the capture device.

        Raises:
            MicrophoneError: If PortAudio is missing or the device cannot
                be opened (absent, busy, or access denied)
        """
        if self._stream is not None:
            return
        try:
            import sounddevice as sd
        except OSError as e:
            raise MicrophoneError(f"PortAudio is not available: {e}") from e

        try:
            self._stream = sd.InputStream(
                device=self._device,
                samplerate=self.sample_rate,
                channels=1,
                dtype="float32",
                blocksize=self.block_size,
                callback=self._callback,
            )
        except (sd.PortAudioError, ValueError) as e:
            raise MicrophoneError(f"Could not open microphone: {e}") from e

        logger.debug("Microphone opened (%d Hz, block %d)", self.sample_rate, self.block_size)

    def _callback(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("Input stream status: %s", status)
        if self._running:
            self._on_frame(np.copy(indata[:, 0]))

    def start(self) -> None:
        """Begin delivering frames. Opens the device if needed."""
        if self._running:
            return
        self.open()
        try:
            self._stream.start()
        except Exception as e:
            raise MicrophoneError(f"Could not start microphone: {e}") from e
        self._running = True

    def stop(self) -> None:
        """Stop delivering frames; the device stays acquired."""
        if not self._running:
            return
        self._running = False
        if self._stream is not None:
            self._stream.stop()

    def close(self) -> None:
        """Stop and release the device."""
        self.stop()
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.close()
            logger.debug("Microphone released")
