# ============================================
# Unit Tests for Configuration
# ============================================
"""
Tests for environment-driven configuration and provider selection.
"""

import pytest

from clinical_documentation.clients import GeminiClient, GroqClient, create_llm_client
from clinical_documentation.core.config import PipelineConfiguration
from clinical_documentation.core.constants import DEFAULT_GEMINI_MODELS, DEFAULT_GROQ_MODELS
from clinical_documentation.core.enums import LLMProvider
from clinical_documentation.core.exceptions import ConfigurationError


class TestProviderSelection:
    """Exactly one provider is active."""

    def test_groq_preferred_when_both_keys_set(self):
        config = PipelineConfiguration(groq_api_key="gsk", gemini_api_key="gem")

        assert config.active_provider == LLMProvider.GROQ
        assert config.active_models == DEFAULT_GROQ_MODELS

    def test_gemini_when_only_gemini_key(self):
        config = PipelineConfiguration(gemini_api_key="gem")

        assert config.active_provider == LLMProvider.GEMINI
        assert config.active_models == DEFAULT_GEMINI_MODELS

    def test_explicit_provider_overrides(self):
        config = PipelineConfiguration(
            groq_api_key="gsk", gemini_api_key="gem", llm_provider=LLMProvider.GEMINI
        )
        assert config.active_provider == LLMProvider.GEMINI

    def test_no_keys(self):
        with pytest.raises(ConfigurationError, match="GROQ_API_KEY"):
            PipelineConfiguration().validate()

    def test_explicit_provider_without_key(self):
        config = PipelineConfiguration(groq_api_key="gsk", llm_provider=LLMProvider.GEMINI)

        with pytest.raises(ConfigurationError, match="Gemini API key required"):
            config.validate()

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigurationError):
            PipelineConfiguration(groq_api_key="gsk", generation_timeout=0).validate()


class TestFromEnvironment:
    """Tests for loading settings from environment variables."""

    def test_groq_settings(self, clean_env, empty_env_file):
        clean_env.setenv("GROQ_API_KEY", "gsk_env")
        clean_env.setenv("GROQ_MODELS", "llama-3.3-70b-versatile, llama3-8b-8192 ,")
        clean_env.setenv("GENERATION_TIMEOUT", "45")
        clean_env.setenv("LOG_LEVEL", "debug")

        config = PipelineConfiguration.from_environment(env_file=empty_env_file)

        assert config.active_provider == LLMProvider.GROQ
        assert config.groq_models == ("llama-3.3-70b-versatile", "llama3-8b-8192")
        assert config.generation_timeout == 45.0
        assert config.log_level == "DEBUG"

    def test_google_api_key_alias(self, clean_env, empty_env_file):
        clean_env.setenv("GOOGLE_API_KEY", "google-key")

        config = PipelineConfiguration.from_environment(env_file=empty_env_file)

        assert config.gemini_api_key == "google-key"
        assert config.active_provider == LLMProvider.GEMINI

    def test_env_file_is_loaded(self, clean_env, tmp_path):
        env_file = tmp_path / "settings.env"
        env_file.write_text("GEMINI_API_KEY=from-file\nLLM_PROVIDER=gemini\n")

        config = PipelineConfiguration.from_environment(env_file=str(env_file))

        assert config.gemini_api_key == "from-file"
        assert config.llm_provider == LLMProvider.GEMINI

    def test_unknown_provider(self, clean_env, empty_env_file):
        clean_env.setenv("GROQ_API_KEY", "gsk_env")
        clean_env.setenv("LLM_PROVIDER", "openai")

        with pytest.raises(ConfigurationError, match="Unknown LLM provider"):
            PipelineConfiguration.from_environment(env_file=empty_env_file)

    def test_invalid_number(self, clean_env, empty_env_file):
        clean_env.setenv("GROQ_API_KEY", "gsk_env")
        clean_env.setenv("GENERATION_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError, match="GENERATION_TIMEOUT"):
            PipelineConfiguration.from_environment(env_file=empty_env_file)

    def test_validation_can_be_deferred(self, clean_env, empty_env_file):
        config = PipelineConfiguration.from_environment(env_file=empty_env_file, validate_on_load=False)

        assert config.active_provider is None

    def test_to_dict_masks_keys(self):
        data = PipelineConfiguration(groq_api_key="gsk_secret").to_dict()

        assert data["groq_api_key"] == "***"
        assert data["gemini_api_key"] is None
        assert data["llm_provider"] == "groq"


class TestClientFactory:
    def test_creates_groq_client(self):
        client = create_llm_client(PipelineConfiguration(groq_api_key="gsk", groq_models=("m1",)))

        assert isinstance(client, GroqClient)
        assert client.model_names == ("m1",)

    def test_creates_gemini_client(self):
        client = create_llm_client(PipelineConfiguration(gemini_api_key="gem"))

        assert isinstance(client, GeminiClient)
        assert client.model_names == DEFAULT_GEMINI_MODELS

    def test_no_provider(self):
        with pytest.raises(ConfigurationError):
            create_llm_client(PipelineConfiguration())
