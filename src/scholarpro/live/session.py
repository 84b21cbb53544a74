"""Live voice conversation session.

Hidden design decisions:
- The session state machine (idle, connecting, active, teardown)
- How microphone frames cross from the PortAudio thread to the event loop
- Sender/receiver task structure around the provider connection
- Teardown order and idempotency
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

import numpy as np
from numpy.typing import NDArray

from ..ai.base import AIProvider, LiveConnection
from ..ai.models import LiveEvent, LiveEventType
from ..audio.capture import FrameCallback, MicrophoneStream
from ..audio.codec import create_blob, decode_audio_data
from ..audio.output import Dispatcher, OutputContext
from ..audio.scheduler import PlaybackScheduler
from ..config import CAPTURE_BLOCK_SIZE, INPUT_SAMPLE_RATE, OUTPUT_SAMPLE_RATE
from ..errors import AudioOutputError, MicrophoneError
from .models import SessionState, TranscriptionEntry
from .transcript import TranscriptAccumulator

logger = logging.getLogger(__name__)

MICROPHONE_ERROR_MESSAGE = "Failed to start conversation. Please check microphone permissions."
CONNECTION_ERROR_MESSAGE = "A connection error occurred."

MicrophoneFactory = Callable[[FrameCallback], MicrophoneStream]
OutputFactory = Callable[[Dispatcher], OutputContext]


class LiveConversation:
    """Full-duplex voice conversation with live transcription.

    Not tied to any UI: observers register ``on_change`` and read the
    public properties. At most one microphone capture exists at a time.

    Example:
        conversation = LiveConversation(provider)
        await conversation.start()
        ...
        for entry in conversation.entries:
            print(entry.speaker.value, entry.text)
        await conversation.stop()
    """

    def __init__(
        self,
        provider: AIProvider,
        input_sample_rate: int = INPUT_SAMPLE_RATE,
        output_sample_rate: int = OUTPUT_SAMPLE_RATE,
        block_size: int = CAPTURE_BLOCK_SIZE,
        microphone_factory: MicrophoneFactory | None = None,
        output_factory: OutputFactory | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._provider = provider
        self._input_sample_rate = input_sample_rate
        self._output_sample_rate = output_sample_rate
        self._block_size = block_size
        self._microphone_factory = microphone_factory or self._create_microphone
        self._output_factory = output_factory or self._create_output
        self.on_change = on_change

        self._state = SessionState.IDLE
        self._error: str | None = None
        self._transcript = TranscriptAccumulator()

        self._frames: asyncio.Queue[NDArray[np.float32]] | None = None
        self._microphone: MicrophoneStream | None = None
        self._output: OutputContext | None = None
        self._scheduler: PlaybackScheduler | None = None
        self._exit_stack: contextlib.AsyncExitStack | None = None
        self._connection: LiveConnection | None = None
        self._sender: asyncio.Task[None] | None = None
        self._receiver: asyncio.Task[None] | None = None
        self._tearing_down = False
        self._generation = 0

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def entries(self) -> list[TranscriptionEntry]:
        return self._transcript.history

    @property
    def pending_input(self) -> str:
        return self._transcript.pending_input

    @property
    def pending_output(self) -> str:
        return self._transcript.pending_output

    @property
    def scheduler(self) -> PlaybackScheduler | None:
        return self._scheduler

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        logger.debug("Live session %s -> %s", self._state.value, state.value)
        self._state = state
        self._changed()

    def _create_microphone(self, on_frame: FrameCallback) -> MicrophoneStream:
        return MicrophoneStream(on_frame, self._input_sample_rate, self._block_size)

    def _create_output(self, dispatch: Dispatcher) -> OutputContext:
        return OutputContext(self._output_sample_rate, dispatch=dispatch)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Open microphone, output and provider session, then start streaming.

        A call while not idle is ignored. Failures are reported through
        ``error`` and leave the session idle.
        """
        if self._state is not SessionState.IDLE:
            logger.warning("Live session is %s; ignoring start", self._state.value)
            return

        self._transcript.clear()
        self._error = None
        self._generation += 1
        generation = self._generation
        self._set_state(SessionState.CONNECTING)

        loop = asyncio.get_running_loop()
        frames: asyncio.Queue[NDArray[np.float32]] = asyncio.Queue()
        self._frames = frames

        def on_frame(frame: NDArray[np.float32]) -> None:
            loop.call_soon_threadsafe(frames.put_nowait, frame)

        try:
            microphone = self._microphone_factory(on_frame)
            self._microphone = microphone
            microphone.open()
        except MicrophoneError:
            logger.exception("Microphone unavailable")
            self._error = MICROPHONE_ERROR_MESSAGE
            await self._teardown(SessionState.ERROR)
            return

        exit_stack = contextlib.AsyncExitStack()
        self._exit_stack = exit_stack
        try:
            self._output = self._output_factory(loop.call_soon_threadsafe)
            self._scheduler = PlaybackScheduler(self._output)
            connection = await exit_stack.enter_async_context(self._provider.connect_live())
        except Exception:
            logger.exception("Failed to open live session")
            if generation != self._generation:
                return
            self._error = CONNECTION_ERROR_MESSAGE
            await self._teardown(SessionState.ERROR)
            return

        if generation != self._generation:
            # Torn down while the connection was being opened
            await exit_stack.aclose()
            return

        self._connection = connection
        try:
            microphone.start()
        except MicrophoneError:
            logger.exception("Microphone failed to start")
            self._error = MICROPHONE_ERROR_MESSAGE
            await self._teardown(SessionState.ERROR)
            return

        self._set_state(SessionState.ACTIVE)
        logger.info("Live session active")
        self._sender = asyncio.create_task(self._send_loop(frames, connection))
        self._receiver = asyncio.create_task(self._receive_loop(connection))

    async def stop(self) -> None:
        """End the conversation and release every resource. Idempotent."""
        if self._state is SessionState.IDLE and not self._holds_resources():
            return
        await self._teardown(SessionState.CLOSED)

    def _holds_resources(self) -> bool:
        return any(
            r is not None
            for r in (self._microphone, self._output, self._exit_stack, self._sender, self._receiver)
        )

    async def _send_loop(self, frames: asyncio.Queue, connection: LiveConnection) -> None:
        try:
            while True:
                frame = await frames.get()
                await connection.send_audio(create_blob(frame, self._input_sample_rate))
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Failed to send audio frame")
            await self._fail()

    async def _receive_loop(self, connection: LiveConnection) -> None:
        try:
            async for event in connection.receive():
                self._handle_event(event)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Live connection error")
            await self._fail()
            return

        logger.info("Live session closed by server")
        await self._teardown(SessionState.CLOSED)

    def _handle_event(self, event: LiveEvent) -> None:
        if event.type is LiveEventType.INPUT_TRANSCRIPT:
            self._transcript.add_input(event.text)
        elif event.type is LiveEventType.OUTPUT_TRANSCRIPT:
            self._transcript.add_output(event.text)
        elif event.type is LiveEventType.TURN_COMPLETE:
            added = self._transcript.complete_turn()
            logger.debug("Turn complete (%d entries)", len(added))
        elif event.type is LiveEventType.AUDIO:
            self._schedule_audio(event.audio)
            return
        self._changed()

    def _schedule_audio(self, data: bytes) -> None:
        if self._scheduler is None or not data:
            return
        buffer = decode_audio_data(data, self._output_sample_rate, 1)
        try:
            self._scheduler.schedule(buffer)
        except (AudioOutputError, RuntimeError):
            logger.exception("Could not schedule audio chunk")

    async def _fail(self) -> None:
        if self._state is SessionState.IDLE:
            return
        self._error = CONNECTION_ERROR_MESSAGE
        await self._teardown(SessionState.ERROR)

    async def _teardown(self, final_state: SessionState) -> None:
        if self._tearing_down:
            return
        self._tearing_down = True
        self._generation += 1
        self._set_state(final_state)
        try:
            current = asyncio.current_task()
            tasks = [
                task for task in (self._sender, self._receiver)
                if task is not None and task is not current
            ]
            for task in tasks:
                task.cancel()
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
            self._sender = None
            self._receiver = None

            microphone, self._microphone = self._microphone, None
            if microphone is not None:
                microphone.close()

            connection, self._connection = self._connection, None
            if connection is not None:
                try:
                    await connection.close()
                except Exception:
                    logger.exception("Error closing live connection")

            exit_stack, self._exit_stack = self._exit_stack, None
            if exit_stack is not None:
                try:
                    await exit_stack.aclose()
                except Exception:
                    logger.exception("Error leaving live session")

            scheduler, self._scheduler = self._scheduler, None
            if scheduler is not None:
                scheduler.stop_all()

            output, self._output = self._output, None
            if output is not None:
                output.close()

            self._frames = None
            self._transcript.reset_buffers()
        finally:
            self._tearing_down = False
            self._set_state(SessionState.IDLE)
            logger.info("Live session torn down")
