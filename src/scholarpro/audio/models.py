"""Data structures for audio handling.

Hides the in-memory representation of decoded audio and of
outbound PCM frames.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field


@dataclass
class AudioBuffer:
    """Decoded PCM audio ready for playback.

    Samples are float32 in [-1.0, 1.0] with shape (frames, channels).
    """

    samples: NDArray[np.float32]
    sample_rate: int

    def __post_init__(self) -> None:
        if self.samples.ndim == 1:
            self.samples = self.samples.reshape(-1, 1)

    @property
    def num_channels(self) -> int:
        return int(self.samples.shape[1])

    @property
    def length(self) -> int:
        """Number of sample frames."""
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.length / float(self.sample_rate)


class AudioBlob(BaseModel):
    """A PCM frame encoded the way the live API expects it."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False, description="16-bit little-endian PCM")
    mime_type: str = Field(description="e.g. audio/pcm;rate=16000")
