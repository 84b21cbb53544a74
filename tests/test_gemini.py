"""Unit tests for the Gemini provider with a mocked SDK client."""
import base64
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from scholarpro.ai.models import ChartKind, ImageInput, LiveEventType
from scholarpro.ai.providers.gemini import (
    GeminiProvider,
    convert_server_message,
    extract_sources,
)
from scholarpro.config import ScholarConfig
from scholarpro.errors import NoAudioError


def text_response(text: str, grounding=None):
    part = SimpleNamespace(text=text, inline_data=None)
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]), grounding_metadata=grounding)
    return SimpleNamespace(candidates=[candidate], text=text)


def audio_response(data):
    part = SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type="audio/pcm"))
    candidate = SimpleNamespace(content=SimpleNamespace(parts=[part]), grounding_metadata=None)
    return SimpleNamespace(candidates=[candidate], text=None)


def web_chunk(uri, title):
    return SimpleNamespace(web=SimpleNamespace(uri=uri, title=title))


@pytest.fixture
def provider():
    provider = GeminiProvider(ScholarConfig(api_key="test-key"))
    provider._client = MagicMock()
    provider._client.aio.models.generate_content = AsyncMock()
    return provider


class TestSolveExercise:
    """Tests for structured solving."""

    @pytest.mark.asyncio
    async def test_parses_structured_response(self, provider):
        """Test that JSON output becomes a SolveResult with chart."""
        provider._client.aio.models.generate_content.return_value = text_response(json.dumps({
            "solution": "Step 1",
            "explanation": "Concept",
            "chartData": {"type": "line", "data": [{"name": "t0", "value": 1}], "dataKey": "value"},
        }))

        result = await provider.solve_exercise("Plot y = x")

        assert result.solution == "Step 1"
        assert result.chart_data.type is ChartKind.LINE

    @pytest.mark.asyncio
    async def test_standard_request(self, provider):
        """Test model, JSON mode and absent thinking config."""
        provider._client.aio.models.generate_content.return_value = text_response('{"solution":"a","explanation":"b"}')

        await provider.solve_exercise("2 + 2")

        kwargs = provider._client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].thinking_config is None
        assert "expert tutor" in kwargs["config"].system_instruction

    def test_thinking_mode_changes_only_model_and_budget(self, provider):
        """Test that both modes share the same request shape."""
        image = ImageInput(data=b"img", mime_type="image/png")
        model_a, contents_a, config_a = provider.build_solve_request("prove it", image, False)
        model_b, contents_b, config_b = provider.build_solve_request("prove it", image, True)

        assert (model_a, model_b) == ("gemini-2.5-flash", "gemini-2.5-pro")
        assert contents_a == contents_b
        assert config_a.model_dump(exclude={"thinking_config"}) == config_b.model_dump(exclude={"thinking_config"})
        assert config_b.thinking_config.thinking_budget == 32768

    def test_image_part_precedes_text(self, provider):
        """Test part order in the user turn."""
        image = ImageInput(data=b"img", mime_type="image/jpeg")
        _, contents, _ = provider.build_solve_request("what is shown?", image, False)

        parts = contents[0].parts
        assert parts[0].inline_data.data == b"img"
        assert parts[0].inline_data.mime_type == "image/jpeg"
        assert parts[1].text == "what is shown?"

    def test_text_only_request_has_one_part(self, provider):
        """Test a request without an image."""
        _, contents, _ = provider.build_solve_request("hello", None, False)
        assert len(contents[0].parts) == 1


class TestGenerateSpeech:
    """Tests for speech synthesis."""

    @pytest.mark.asyncio
    async def test_returns_base64_audio(self, provider):
        """Test that raw audio bytes come back base64-encoded."""
        provider._client.aio.models.generate_content.return_value = audio_response(b"\x01\x02\x03\x04")

        audio = await provider.generate_speech("Hello")

        assert base64.b64decode(audio) == b"\x01\x02\x03\x04"
        kwargs = provider._client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash-preview-tts"
        voice = kwargs["config"].speech_config.voice_config.prebuilt_voice_config.voice_name
        assert voice == "Kore"
        assert kwargs["contents"][0].parts[0].text == "Say clearly and concisely: Hello"

    @pytest.mark.asyncio
    async def test_missing_audio_raises(self, provider):
        """Test NoAudioError on a text-only response."""
        provider._client.aio.models.generate_content.return_value = text_response("sorry")

        with pytest.raises(NoAudioError, match="No audio data received from API."):
            await provider.generate_speech("Hello")

    @pytest.mark.asyncio
    async def test_no_candidates_raises(self, provider):
        """Test NoAudioError on an empty response."""
        provider._client.aio.models.generate_content.return_value = SimpleNamespace(candidates=[], text=None)

        with pytest.raises(NoAudioError):
            await provider.generate_speech("Hello")


class TestSearchWeb:
    """Tests for search grounding."""

    @pytest.mark.asyncio
    async def test_answer_and_sources(self, provider):
        """Test the search tool and source extraction."""
        grounding = SimpleNamespace(grounding_chunks=[
            web_chunk("https://one.example", "One"),
            web_chunk("https://two.example", None),
        ])
        provider._client.aio.models.generate_content.return_value = text_response("Answer.", grounding)

        result = await provider.search_web("question")

        assert result.answer == "Answer."
        assert [(s.uri, s.title) for s in result.sources] == [
            ("https://one.example", "One"),
            ("https://two.example", ""),
        ]
        config = provider._client.aio.models.generate_content.call_args.kwargs["config"]
        assert config.tools[0].google_search is not None

    def test_chunks_without_uri_are_skipped(self):
        """Test filtering of non-web or URI-less chunks."""
        grounding = SimpleNamespace(grounding_chunks=[
            SimpleNamespace(web=None),
            web_chunk("", "Empty"),
            web_chunk("https://ok.example", "OK"),
        ])
        sources = extract_sources(text_response("x", grounding))
        assert [s.uri for s in sources] == ["https://ok.example"]

    def test_no_grounding_metadata(self):
        """Test a response without citations."""
        assert extract_sources(text_response("x")) == []


class TestLiveMessages:
    """Tests for mapping live server messages to events."""

    def _message(self, **content):
        defaults = dict(input_transcription=None, output_transcription=None, model_turn=None, turn_complete=None)
        defaults.update(content)
        return SimpleNamespace(server_content=SimpleNamespace(**defaults))

    def test_transcriptions(self):
        events = convert_server_message(self._message(
            input_transcription=SimpleNamespace(text="hi"),
            output_transcription=SimpleNamespace(text="hello"),
        ))
        assert [(e.type, e.text) for e in events] == [
            (LiveEventType.INPUT_TRANSCRIPT, "hi"),
            (LiveEventType.OUTPUT_TRANSCRIPT, "hello"),
        ]

    def test_audio_then_turn_complete(self):
        part = SimpleNamespace(inline_data=SimpleNamespace(data=b"\x00\x01"))
        events = convert_server_message(self._message(
            model_turn=SimpleNamespace(parts=[part]),
            turn_complete=True,
        ))
        assert [e.type for e in events] == [LiveEventType.AUDIO, LiveEventType.TURN_COMPLETE]
        assert events[0].audio == b"\x00\x01"

    def test_message_without_server_content(self):
        assert convert_server_message(SimpleNamespace(server_content=None)) == []

    def test_live_config(self, provider):
        """Test modalities, transcription and voice."""
        config = provider.build_live_config()

        assert config.input_audio_transcription is not None
        assert config.output_audio_transcription is not None
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Zephyr"


class TestGeminiIntegration:
    """Integration tests against the real API."""

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_solve_real_api(self, api_keys):
        """Integration test: solve a trivial exercise."""
        if not api_keys["gemini"]:
            pytest.skip("GEMINI_API_KEY not set")

        async with GeminiProvider(ScholarConfig(api_key=api_keys["gemini"])) as provider:
            result = await provider.solve_exercise("Solve for x: 2x + 3 = 7")

        assert "2" in result.solution
        assert result.explanation

    @pytest.mark.asyncio
    @pytest.mark.integration
    async def test_search_real_api(self, api_keys):
        """Integration test: grounded search returns an answer."""
        if not api_keys["gemini"]:
            pytest.skip("GEMINI_API_KEY not set")

        async with GeminiProvider(ScholarConfig(api_key=api_keys["gemini"])) as provider:
            result = await provider.search_web("Who discovered penicillin?")

        assert result.answer
