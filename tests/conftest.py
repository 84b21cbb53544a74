"""Pytest configuration and shared fixtures."""
import asyncio
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import numpy as np
import pytest

from scholarpro.ai.base import AIProvider, LiveConnection
from scholarpro.ai.models import (
    LiveEvent,
    LiveEventType,
    SearchResult,
    SolveResult,
    Source,
)
from scholarpro.audio.codec import encode, float_to_pcm16
from scholarpro.audio.output import OutputContext
from scholarpro.errors import MicrophoneError

_FINISHED = object()


def pcm_chunk(frames: int = 2400, value: float = 0.25) -> bytes:
    """Constant-valued 16-bit PCM chunk."""
    return float_to_pcm16(np.full(frames, value, dtype=np.float32))


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Yield to the loop until ``predicate()`` holds."""
    async def _poll():
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


class FakeLiveConnection(LiveConnection):
    """In-memory live connection driven by the test."""

    def __init__(self) -> None:
        self.sent = []
        self.closed = False
        self.exited = False
        self._events: asyncio.Queue = asyncio.Queue()

    def push(self, event: LiveEvent) -> None:
        self._events.put_nowait(event)

    def push_text(self, kind: LiveEventType, text: str) -> None:
        self.push(LiveEvent(type=kind, text=text))

    def finish(self) -> None:
        """Simulate the server closing the stream."""
        self._events.put_nowait(_FINISHED)

    def fail(self, error: Exception) -> None:
        self._events.put_nowait(error)

    async def send_audio(self, blob) -> None:
        self.sent.append(blob)

    async def receive(self) -> AsyncIterator[LiveEvent]:
        while True:
            item = await self._events.get()
            if item is _FINISHED:
                return
            if isinstance(item, Exception):
                raise item
            yield item

    async def close(self) -> None:
        self.closed = True


class FakeProvider(AIProvider):
    """AIProvider double recording every call."""

    def __init__(self) -> None:
        self.solve_result = SolveResult(solution="x = 2", explanation="Linear equations")
        self.solve_error: Exception | None = None
        self.search_result = SearchResult(
            answer="Answer",
            sources=[Source(uri="https://example.org/a", title="A")]
        )
        self.search_error: Exception | None = None
        self.speech_b64 = encode(pcm_chunk(2400))
        self.speech_error: Exception | None = None
        self.live_error: Exception | None = None
        self.hold_connects = False
        self.pending_connects: list[asyncio.Event] = []

        self.solve_calls = []
        self.search_calls = []
        self.speech_calls = []
        self.connections: list[FakeLiveConnection] = []
        self.closed = False

    async def solve_exercise(self, prompt, image=None, thinking_mode=False):
        self.solve_calls.append((prompt, image, thinking_mode))
        await asyncio.sleep(0)
        if self.solve_error is not None:
            raise self.solve_error
        return self.solve_result

    async def generate_speech(self, text):
        self.speech_calls.append(text)
        await asyncio.sleep(0)
        if self.speech_error is not None:
            raise self.speech_error
        return self.speech_b64

    async def search_web(self, query):
        self.search_calls.append(query)
        await asyncio.sleep(0)
        if self.search_error is not None:
            raise self.search_error
        return self.search_result

    @asynccontextmanager
    async def connect_live(self):
        await asyncio.sleep(0)
        if self.hold_connects:
            gate = asyncio.Event()
            self.pending_connects.append(gate)
            await gate.wait()
        if self.live_error is not None:
            raise self.live_error
        connection = FakeLiveConnection()
        self.connections.append(connection)
        try:
            yield connection
        finally:
            connection.exited = True

    async def close(self):
        self.closed = True


class FakeMicrophone:
    """Stand-in for MicrophoneStream without PortAudio."""

    def __init__(self, on_frame, fail_on_open: bool = False) -> None:
        self._on_frame = on_frame
        self._fail_on_open = fail_on_open
        self.is_open = False
        self.running = False
        self.closed = False

    def open(self) -> None:
        if self._fail_on_open:
            raise MicrophoneError("Permission denied")
        self.is_open = True

    def start(self) -> None:
        self.open()
        self.running = True

    def stop(self) -> None:
        self.running = False

    def close(self) -> None:
        self.stop()
        self.is_open = False
        self.closed = True

    def emit(self, frame) -> None:
        """Deliver a frame as the audio thread would."""
        if self.running:
            self._on_frame(frame)


class MicrophoneFactory:
    """Callable factory that remembers every microphone it created."""

    def __init__(self, fail_on_open: bool = False) -> None:
        self.fail_on_open = fail_on_open
        self.created: list[FakeMicrophone] = []

    def __call__(self, on_frame) -> FakeMicrophone:
        microphone = FakeMicrophone(on_frame, fail_on_open=self.fail_on_open)
        self.created.append(microphone)
        return microphone


class OutputFactory:
    """Creates headless OutputContexts driven by ``render``."""

    def __init__(self, sample_rate: int = 24000) -> None:
        self.sample_rate = sample_rate
        self.created: list[OutputContext] = []

    def __call__(self, dispatch) -> OutputContext:
        context = OutputContext(self.sample_rate, open_stream=False, dispatch=dispatch)
        self.created.append(context)
        return context


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "gemini": os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
    }


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def mic_factory():
    return MicrophoneFactory()


@pytest.fixture
def output_factory():
    return OutputFactory()


@pytest.fixture
def output_context():
    """Headless 24kHz output context."""
    context = OutputContext(24000, open_stream=False)
    yield context
    context.close()


@pytest.fixture
def sample_image(tmp_path):
    """Tiny file with an image extension."""
    path = tmp_path / "problem.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return path
