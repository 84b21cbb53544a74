from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SessionState(str, Enum):
    """Lifecycle states of a live conversation."""

    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    ERROR = "error"
    CLOSED = "closed"


class Speaker(str, Enum):
    USER = "user"
    MODEL = "model"


class TranscriptionEntry(BaseModel):
    """One completed utterance in the conversation history."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    text: str = Field(min_length=1)
