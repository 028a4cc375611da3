"""
Client Factory - One Active Provider from Configuration

Author: Shubham Singh
Date: December 2025
"""

from clinical_documentation.clients.gemini_client import GeminiClient
from clinical_documentation.clients.groq_client import GroqClient
from clinical_documentation.clients.llm_client import BaseLLMClient
from clinical_documentation.core.config import PipelineConfiguration
from clinical_documentation.core.enums import LLMProvider
from clinical_documentation.core.exceptions import ConfigurationError


def create_llm_client(config: PipelineConfiguration) -> BaseLLMClient:
    """
    Create the single client the configuration designates.

    The other provider is never instantiated, even when its key is set.

    Raises:
        ConfigurationError: If no provider is designated or its key is missing
    """
    config.validate()
    provider = config.active_provider

    if provider == LLMProvider.GROQ:
        return GroqClient(api_key=config.groq_api_key, model_names=config.groq_models)

    if provider == LLMProvider.GEMINI:
        return GeminiClient(api_key=config.gemini_api_key, model_names=config.gemini_models)

    raise ConfigurationError(
        f"Unsupported LLM provider: {provider}",
        context={"supported": [p.value for p in LLMProvider]},
    )
