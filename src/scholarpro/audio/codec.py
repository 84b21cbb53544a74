"""Conversions between float PCM, 16-bit PCM bytes, base64 and AudioBuffer."""

import base64

import numpy as np
from numpy.typing import NDArray

from .models import AudioBlob, AudioBuffer

PCM16_SCALE = 32768.0


def encode(data: bytes) -> str:
    """Base64-encode raw bytes."""
    return base64.b64encode(data).decode("ascii")


def decode(text: str) -> bytes:
    """Decode base64 text into raw bytes."""
    return base64.b64decode(text)


def float_to_pcm16(samples: NDArray[np.floating]) -> bytes:
    """Convert float samples in [-1.0, 1.0] to little-endian int16 bytes.

    Values outside the range are clipped rather than wrapped.
    """
    scaled = np.asarray(samples, dtype=np.float32).reshape(-1) * PCM16_SCALE
    clipped = np.clip(scaled, -PCM16_SCALE, PCM16_SCALE - 1)
    return clipped.astype("<i2").tobytes()


def pcm16_to_float(data: bytes, num_channels: int = 1) -> NDArray[np.float32]:
    """Convert interleaved little-endian int16 bytes to float32 frames.

    Returns:
        Array of shape (frames, num_channels)
    """
    if num_channels < 1:
        raise ValueError("num_channels must be at least 1")

    usable = len(data) - (len(data) % 2)
    ints = np.frombuffer(data[:usable], dtype="<i2")
    frames = ints.shape[0] // num_channels
    ints = ints[:frames * num_channels]
    return (ints.astype(np.float32) / PCM16_SCALE).reshape(frames, num_channels)


def create_blob(samples: NDArray[np.floating], sample_rate: int = 16000) -> AudioBlob:
    """Package captured float samples for sending to the live API."""
    return AudioBlob(
        data=float_to_pcm16(samples),
        mime_type=f"audio/pcm;rate={sample_rate}",
    )


def decode_audio_data(data: bytes, sample_rate: int, num_channels: int = 1) -> AudioBuffer:
    """Decode raw 16-bit PCM bytes into an AudioBuffer."""
    return AudioBuffer(samples=pcm16_to_float(data, num_channels), sample_rate=sample_rate)
