from .base import AIProvider, LiveConnection
from .factory import create_ai_provider
from .models import (
    ChartData,
    ChartKind,
    ChartPoint,
    ImageInput,
    LiveEvent,
    LiveEventType,
    SearchResult,
    SolveResult,
    Source,
)
from .providers import GeminiLiveConnection, GeminiProvider

__all__ = [
    "AIProvider",
    "LiveConnection",
    "create_ai_provider",
    "ChartData",
    "ChartKind",
    "ChartPoint",
    "ImageInput",
    "LiveEvent",
    "LiveEventType",
    "SearchResult",
    "SolveResult",
    "Source",
    "GeminiLiveConnection",
    "GeminiProvider",
]
