from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager
from typing import Any

from ..audio.models import AudioBlob
from .models import ImageInput, LiveEvent, SearchResult, SolveResult


class LiveConnection(ABC):
    """An open bidirectional streaming session with the provider."""

    @abstractmethod
    async def send_audio(self, blob: AudioBlob) -> None:
        """Send one captured PCM frame."""

    @abstractmethod
    def receive(self) -> AsyncIterator[LiveEvent]:
        """Yield inbound events until the server closes the stream."""

    @abstractmethod
    async def close(self) -> None:
        """Close the session. Safe to call more than once."""


class AIProvider(ABC):
    """Abstract base class for generative-AI providers.

    This module hides the design decision of which AI service backs the
    application. Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion (schemas, inline media)
    - Model selection per capability
    - Streaming session transport

    Supports async context manager protocol for proper resource cleanup:
        async with provider:
            result = await provider.solve_exercise("2 + 2?")
    """

    @abstractmethod
    async def solve_exercise(
        self,
        prompt: str,
        image: ImageInput | None = None,
        thinking_mode: bool = False,
    ) -> SolveResult:
        """Solve a homework-style problem.

        Args:
            prompt: Problem text (may be empty when an image is given)
            image: Optional inline image of the problem
            thinking_mode: Use the extended reasoning model and budget

        Returns:
            SolveResult. If the provider output is not valid JSON, the raw
            text is returned as the solution.

        Raises:
            ProviderError: If the request itself fails
        """

    @abstractmethod
    async def generate_speech(self, text: str) -> str:
        """Synthesize speech for a short utterance.

        Returns:
            Base64-encoded single-channel 24kHz 16-bit PCM

        Raises:
            NoAudioError: If the response contains no audio payload
            ProviderError: If the request fails
        """

    @abstractmethod
    async def search_web(self, query: str) -> SearchResult:
        """Answer a free-text query with web-grounded citations.

        Raises:
            ProviderError: If the request fails
        """

    @abstractmethod
    def connect_live(self) -> AbstractAsyncContextManager[LiveConnection]:
        """Open a live voice session.

        Usage:
            async with provider.connect_live() as connection:
                await connection.send_audio(blob)
                async for event in connection.receive():
                    ...
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "AIProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup,
        a known race in httpx/anyio transport shutdown.
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
