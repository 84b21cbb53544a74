"""Unit tests for configuration loading and the provider factory."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from scholarpro.ai import GeminiProvider, create_ai_provider
from scholarpro.config import ScholarConfig, load_config
from scholarpro.errors import ConfigurationError
from scholarpro.prompts import (
    PROMPTS_DIR_ENV,
    clear_cache,
    format_speech_prompt,
    get_solver_instruction,
    load_prompt,
)

_ENV_VARS = [
    "GEMINI_API_KEY",
    "API_KEY",
    "SCHOLAR_SOLVER_MODEL",
    "SCHOLAR_THINKING_MODEL",
    "SCHOLAR_TTS_MODEL",
    "SCHOLAR_TTS_VOICE",
    "SCHOLAR_SEARCH_MODEL",
    "SCHOLAR_LIVE_MODEL",
    "SCHOLAR_LIVE_VOICE",
    "SCHOLAR_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Isolate tests from the developer's environment and .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("scholarpro.config.load_dotenv", lambda: False)
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_key_raises(self, clean_env):
        """Test that startup fails without an API key."""
        with pytest.raises(ConfigurationError, match="API_KEY environment variable is not set"):
            load_config()

    def test_gemini_key_preferred(self, clean_env):
        """Test GEMINI_API_KEY wins over API_KEY."""
        clean_env.setenv("GEMINI_API_KEY", "gemini-key")
        clean_env.setenv("API_KEY", "generic-key")

        assert load_config().api_key == "gemini-key"

    def test_api_key_fallback(self, clean_env):
        """Test that API_KEY alone is accepted."""
        clean_env.setenv("API_KEY", "generic-key")
        assert load_config().api_key == "generic-key"

    def test_defaults(self, clean_env):
        """Test default models, voices and audio settings."""
        config = load_config(api_key="k")

        assert config.solver_model == "gemini-2.5-flash"
        assert config.thinking_model == "gemini-2.5-pro"
        assert config.thinking_budget == 32768
        assert config.tts_voice == "Kore"
        assert config.live_voice == "Zephyr"
        assert config.input_sample_rate == 16000
        assert config.output_sample_rate == 24000
        assert config.capture_block_size == 4096

    def test_environment_overrides(self, clean_env):
        """Test SCHOLAR_* variables."""
        clean_env.setenv("API_KEY", "k")
        clean_env.setenv("SCHOLAR_THINKING_MODEL", "custom-pro")
        clean_env.setenv("SCHOLAR_LIVE_VOICE", "Puck")

        config = load_config()

        assert config.thinking_model == "custom-pro"
        assert config.live_voice == "Puck"

    def test_explicit_overrides_win(self, clean_env):
        """Test keyword overrides beat the environment."""
        clean_env.setenv("API_KEY", "k")
        clean_env.setenv("SCHOLAR_SOLVER_MODEL", "from-env")

        assert load_config(solver_model="explicit").solver_model == "explicit"

    def test_config_is_frozen(self):
        """Test immutability."""
        config = ScholarConfig(api_key="k")
        with pytest.raises(ValueError):
            config.api_key = "other"  # type: ignore


class TestProviderFactory:
    """Tests for create_ai_provider."""

    def test_create_gemini_provider(self):
        """Test creating the Gemini provider with overrides."""
        provider = create_ai_provider("gemini", api_key="test-key", solver_model="gemini-x")

        assert isinstance(provider, GeminiProvider)
        assert provider.config.solver_model == "gemini-x"
        assert provider.config.thinking_model == "gemini-2.5-pro"

    def test_missing_api_key(self):
        """Test that missing API key raises TypeError."""
        with pytest.raises(TypeError, match="requires 'api_key'"):
            create_ai_provider("gemini")

    def test_unknown_provider(self):
        """Test that unknown provider type raises ValueError."""
        with pytest.raises(ValueError, match="Unsupported provider"):
            create_ai_provider("unknown", api_key="test-key")

    @given(st.text(min_size=1))
    def test_factory_with_random_provider_names(self, provider_name: str):
        """Property test: Factory should only accept known providers."""
        if provider_name.lower() in ("gemini", "google"):
            assert isinstance(create_ai_provider(provider_name, api_key="fake"), GeminiProvider)
        else:
            with pytest.raises(ValueError):
                create_ai_provider(provider_name, api_key="fake")


@pytest.fixture
def fresh_prompts(monkeypatch):
    monkeypatch.delenv(PROMPTS_DIR_ENV, raising=False)
    clear_cache()
    yield monkeypatch
    clear_cache()


class TestPrompts:
    """Tests for prompt loading and overrides."""

    def test_bundled_prompts(self, fresh_prompts):
        assert "expert tutor" in get_solver_instruction()
        assert format_speech_prompt("Hi") == "Say clearly and concisely: Hi"

    def test_override_directory_wins(self, fresh_prompts, tmp_path):
        """Test that a file in the override directory replaces the bundled one."""
        (tmp_path / "speech.txt").write_text("Read slowly: {text}\n", encoding="utf-8")
        fresh_prompts.setenv(PROMPTS_DIR_ENV, str(tmp_path))
        clear_cache()

        assert format_speech_prompt("x") == "Read slowly: x"

    def test_partial_override_falls_back(self, fresh_prompts, tmp_path):
        fresh_prompts.setenv(PROMPTS_DIR_ENV, str(tmp_path))
        assert "expert tutor" in load_prompt("solver")

    def test_unknown_prompt(self, fresh_prompts):
        with pytest.raises(FileNotFoundError, match="Prompt 'missing' not found"):
            load_prompt("missing")
