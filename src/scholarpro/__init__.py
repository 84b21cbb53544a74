"""
Scholar Pro: an AI-powered academic assistant.

Solves exercises with structured, step-by-step answers, holds live voice
conversations with transcription, and answers questions with
web-grounded citations.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .ai import (
    AIProvider,
    ChartData,
    SearchResult,
    SolveResult,
    create_ai_provider,
)
from .config import ScholarConfig, load_config
from .errors import ScholarError

__all__ = [
    "AIProvider",
    "ChartData",
    "ScholarConfig",
    "ScholarError",
    "SearchResult",
    "SolveResult",
    "create_ai_provider",
    "load_config",
]
