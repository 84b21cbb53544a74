"""Live voice conversation.

Module structure:
- models.py: Session states and transcript entries
- transcript.py: Per-turn accumulation of transcription deltas
- session.py: The LiveConversation state machine
"""

from .models import SessionState, Speaker, TranscriptionEntry
from .session import (
    CONNECTION_ERROR_MESSAGE,
    MICROPHONE_ERROR_MESSAGE,
    LiveConversation,
)
from .transcript import TranscriptAccumulator

__all__ = [
    "CONNECTION_ERROR_MESSAGE",
    "MICROPHONE_ERROR_MESSAGE",
    "LiveConversation",
    "SessionState",
    "Speaker",
    "TranscriptAccumulator",
    "TranscriptionEntry",
]
