"""Audio module for scholarpro.

Module structure (each module hides a design decision):
- models.py: Buffer and frame representations
- codec.py: PCM/base64 conversions
- output.py: Output context, mixing and the playback clock
- capture.py: Microphone capture
- scheduler.py: Back-to-back scheduling of streamed chunks
- player.py: On-demand speech playback with caching
"""

from .capture import MicrophoneStream
from .codec import (
    create_blob,
    decode,
    decode_audio_data,
    encode,
    float_to_pcm16,
    pcm16_to_float,
)
from .models import AudioBlob, AudioBuffer
from .output import AudioSource, OutputContext
from .player import AudioPlayer
from .scheduler import PlaybackScheduler

__all__ = [
    "AudioBlob",
    "AudioBuffer",
    "AudioPlayer",
    "AudioSource",
    "MicrophoneStream",
    "OutputContext",
    "PlaybackScheduler",
    "create_blob",
    "decode",
    "decode_audio_data",
    "encode",
    "float_to_pcm16",
    "pcm16_to_float",
]
