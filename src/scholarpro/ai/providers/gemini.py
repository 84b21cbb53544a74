"""Google Gemini provider implementation.

Uses the official Google GenAI SDK (async client) for structured
generation, speech synthesis, search grounding and the Live API.
Reference: https://github.com/googleapis/python-genai
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from ...audio.codec import decode, encode
from ...audio.models import AudioBlob
from ...config import ScholarConfig
from ...errors import LiveSessionError, NoAudioError, ProviderError
from ...prompts import format_speech_prompt, get_solver_instruction
from ..base import AIProvider, LiveConnection
from ..models import (
    ChartData,
    ImageInput,
    LiveEvent,
    LiveEventType,
    SearchResult,
    SolveResult,
    Source,
)

logger = logging.getLogger(__name__)

FALLBACK_EXPLANATION = "Could not extract a separate explanation."

SOLVE_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "solution": types.Schema(type=types.Type.STRING),
        "explanation": types.Schema(type=types.Type.STRING),
        "chartData": types.Schema(
            type=types.Type.OBJECT,
            nullable=True,
            properties={
                "type": types.Schema(type=types.Type.STRING, enum=["bar", "line"]),
                "data": types.Schema(
                    type=types.Type.ARRAY,
                    items=types.Schema(
                        type=types.Type.OBJECT,
                        properties={
                            "name": types.Schema(type=types.Type.STRING),
                            "value": types.Schema(type=types.Type.NUMBER),
                        },
                        required=["name", "value"],
                    ),
                ),
                "dataKey": types.Schema(type=types.Type.STRING),
            },
        ),
    },
    required=["solution", "explanation"],
)


def parse_solve_response(text: str) -> SolveResult:
    """Turn the model's JSON output into a SolveResult.

    Output that is not a JSON object with non-empty "solution" and
    "explanation" falls back to the raw text as the solution. A chart
    descriptor that fails validation (or has no points) is dropped.
    """
    raw = text.strip()
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Solver response is not valid JSON: %s", e)
        return SolveResult(solution=raw, explanation=FALLBACK_EXPLANATION)

    if not isinstance(payload, dict) or not payload.get("solution") or not payload.get("explanation"):
        logger.warning("Solver response is missing required fields")
        return SolveResult(solution=raw, explanation=FALLBACK_EXPLANATION)

    chart: ChartData | None = None
    raw_chart = payload.get("chartData")
    if raw_chart:
        try:
            chart = ChartData.model_validate(raw_chart)
        except ValidationError as e:
            logger.warning("Dropping invalid chart descriptor: %s", e.error_count())
        else:
            if not chart.data:
                logger.info("Dropping chart descriptor without data points")
                chart = None

    return SolveResult(
        solution=str(payload["solution"]),
        explanation=str(payload["explanation"]),
        chart_data=chart,
    )


def extract_sources(response: Any) -> list[Source]:
    """Collect web citations from grounding metadata, in provider order."""
    if not response.candidates:
        return []
    metadata = response.candidates[0].grounding_metadata
    if metadata is None or not metadata.grounding_chunks:
        return []

    sources = []
    for chunk in metadata.grounding_chunks:
        web = chunk.web
        if web is None or not web.uri:
            continue
        sources.append(Source(uri=web.uri, title=web.title or ""))
    return sources


def convert_server_message(message: Any) -> list[LiveEvent]:
    """Map a LiveServerMessage to provider-neutral events.

    Transcription deltas come first, then audio chunks, then the
    turn-complete marker, so a turn's last words are never lost.
    """
    content = message.server_content
    if content is None:
        return []

    events = []
    if content.input_transcription is not None and content.input_transcription.text:
        events.append(LiveEvent(
            type=LiveEventType.INPUT_TRANSCRIPT,
            text=content.input_transcription.text
        ))
    if content.output_transcription is not None and content.output_transcription.text:
        events.append(LiveEvent(
            type=LiveEventType.OUTPUT_TRANSCRIPT,
            text=content.output_transcription.text
        ))
    if content.model_turn is not None and content.model_turn.parts:
        for part in content.model_turn.parts:
            inline = part.inline_data
            if inline is None or not inline.data:
                continue
            data = inline.data if isinstance(inline.data, bytes) else decode(inline.data)
            events.append(LiveEvent(type=LiveEventType.AUDIO, audio=data))
    if content.turn_complete:
        events.append(LiveEvent(type=LiveEventType.TURN_COMPLETE))
    return events


class GeminiLiveConnection(LiveConnection):
    """LiveConnection over a google-genai AsyncSession."""

    def __init__(self, session: Any) -> None:
        self._session = session
        self._closed = False

    async def send_audio(self, blob: AudioBlob) -> None:
        if self._closed:
            return
        try:
            await self._session.send_realtime_input(
                audio=types.Blob(data=blob.data, mime_type=blob.mime_type)
            )
        except ConnectionClosedOK:
            self._closed = True
        except ConnectionClosed as e:
            raise LiveSessionError(f"Live connection lost: {e}") from e

    async def receive(self) -> AsyncIterator[LiveEvent]:
        # session.receive() ends after every turn_complete, so keep
        # re-entering it until the server stops sending
        try:
            while not self._closed:
                received = False
                async for message in self._session.receive():
                    received = True
                    for event in convert_server_message(message):
                        yield event
                if not received:
                    break
        except ConnectionClosedOK:
            logger.info("Live session closed by server")
        except ConnectionClosed as e:
            raise LiveSessionError(f"Live connection lost: {e}") from e

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._session.close()


class GeminiProvider(AIProvider):
    """Google Gemini provider implementation.

    Hidden design decisions:
    - Google GenAI client initialization
    - Model selection per capability (thinking mode swaps model and budget)
    - JSON schema for structured solutions and the raw-text fallback
    - Extraction of audio payloads and grounding chunks
    - Live API session configuration
    """

    def __init__(self, config: ScholarConfig, **client_kwargs: Any):
        """Initialize Gemini provider.

        Args:
            config: Credentials and model identifiers
            **client_kwargs: Additional kwargs for genai.Client
        """
        self._config = config
        self._client = genai.Client(api_key=config.api_key, **client_kwargs)

    @property
    def config(self) -> ScholarConfig:
        return self._config

    def _extract_text(self, response: Any) -> str:
        """Extract text content from a response, handling empty candidates."""
        if response.candidates:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
                if texts:
                    return "".join(texts)

        try:
            return response.text or ""
        except (ValueError, AttributeError):
            return ""

    def build_solve_request(
        self,
        prompt: str,
        image: ImageInput | None,
        thinking_mode: bool,
    ) -> tuple[str, list[types.Content], types.GenerateContentConfig]:
        """Build (model, contents, config) for a solve call.

        Thinking mode changes only the model and the thinking budget.
        """
        model = self._config.thinking_model if thinking_mode else self._config.solver_model

        parts = []
        if image is not None:
            parts.append(types.Part.from_bytes(data=image.data, mime_type=image.mime_type))
        parts.append(types.Part.from_text(text=prompt))
        contents = [types.Content(role="user", parts=parts)]

        config = types.GenerateContentConfig(
            system_instruction=get_solver_instruction(),
            response_mime_type="application/json",
            response_schema=SOLVE_RESPONSE_SCHEMA,
        )
        if thinking_mode:
            config.thinking_config = types.ThinkingConfig(
                thinking_budget=self._config.thinking_budget
            )
        return model, contents, config

    async def solve_exercise(
        self,
        prompt: str,
        image: ImageInput | None = None,
        thinking_mode: bool = False,
    ) -> SolveResult:
        model, contents, config = self.build_solve_request(prompt, image, thinking_mode)
        logger.info("Solving exercise with %s (image=%s)", model, image is not None)

        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config
            )
        except genai_errors.APIError as e:
            raise ProviderError(str(e), operation="solve_exercise") from e

        return parse_solve_response(self._extract_text(response))

    async def generate_speech(self, text: str) -> str:
        voice = types.VoiceConfig(
            prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self._config.tts_voice)
        )
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(voice_config=voice),
        )
        contents = [types.Content(role="user", parts=[types.Part.from_text(text=format_speech_prompt(text))])]

        try:
            response = await self._client.aio.models.generate_content(
                model=self._config.tts_model,
                contents=contents,
                config=config
            )
        except genai_errors.APIError as e:
            raise ProviderError(str(e), operation="generate_speech") from e

        data: bytes | str | None = None
        if response.candidates:
            content = response.candidates[0].content
            if content and content.parts and content.parts[0].inline_data:
                data = content.parts[0].inline_data.data
        if not data:
            raise NoAudioError()

        return encode(data) if isinstance(data, bytes) else data

    async def search_web(self, query: str) -> SearchResult:
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())]
        )
        logger.info("Grounded search with %s", self._config.search_model)

        try:
            response = await self._client.aio.models.generate_content(
                model=self._config.search_model,
                contents=query,
                config=config
            )
        except genai_errors.APIError as e:
            raise ProviderError(str(e), operation="search_web") from e

        return SearchResult(answer=self._extract_text(response), sources=extract_sources(response))

    def build_live_config(self) -> types.LiveConnectConfig:
        """Session config: audio replies, both transcriptions, prebuilt voice."""
        return types.LiveConnectConfig(
            response_modalities=[types.Modality.AUDIO],
            input_audio_transcription=types.AudioTranscriptionConfig(),
            output_audio_transcription=types.AudioTranscriptionConfig(),
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(
                        voice_name=self._config.live_voice
                    )
                )
            ),
        )

    @asynccontextmanager
    async def connect_live(self) -> AsyncIterator[LiveConnection]:
        logger.info("Opening live session with %s", self._config.live_model)
        try:
            session_cm = self._client.aio.live.connect(
                model=self._config.live_model,
                config=self.build_live_config()
            )
            session = await session_cm.__aenter__()
        except (genai_errors.APIError, ConnectionClosed, OSError) as e:
            raise LiveSessionError(f"Could not open live session: {e}") from e

        connection = GeminiLiveConnection(session)
        try:
            yield connection
        finally:
            connection._closed = True
            await session_cm.__aexit__(None, None, None)
            logger.info("Live session closed")

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
