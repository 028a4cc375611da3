"""
Groq Client - Primary Provider (OpenAI-compatible API)

This module provides the concrete TextCompletionProvider for Groq's hosted
Llama/Mixtral models. Groq exposes an OpenAI-compatible endpoint, so the
official openai SDK is used with a different base URL.

Why Separate File:
    1. Single Responsibility: one provider per file
    2. Provider-specific handling: chat messages, SDK exception types

Author: Shubham Singh
Date: December 2025
"""

from typing import Optional, Sequence

from loguru import logger

from clinical_documentation.clients.llm_client import BaseLLMClient
from clinical_documentation.core.constants import (
    DEFAULT_GROQ_MODELS,
    GENERATION_TEMPERATURE,
    GROQ_BASE_URL,
)
from clinical_documentation.core.enums import AttemptOutcome
from clinical_documentation.core.exceptions import ConfigurationError


# =============================================================================
# STAGE 1: GROQ CLIENT IMPLEMENTATION
# =============================================================================


class GroqClient(BaseLLMClient):
    """
    Groq API client for document generation.

    What it does:
        Sends the system and user prompt as chat messages to each candidate
        model in turn, via the openai library pointed at Groq.

    Default Models (in fallback order):
        llama-3.3-70b-versatile → ... → llama3-8b-8192

    Example:
        >>> client = GroqClient(api_key="gsk_...")
        >>> text = client.complete(system_prompt, user_prompt, max_output_tokens=2000)
    """

    def __init__(
        self,
        api_key: str,
        model_names: Sequence[str] = DEFAULT_GROQ_MODELS,
        temperature: float = GENERATION_TEMPERATURE,
        base_url: str = GROQ_BASE_URL,
    ):
        """
        Initialize Groq client.

        STAGE 1.1: Initialize base class
        STAGE 1.2: Configure OpenAI SDK against the Groq endpoint

        Args:
            api_key: Groq API key
            model_names: Ordered candidate models
            temperature: Sampling temperature
            base_url: OpenAI-compatible endpoint
        """
        super().__init__(api_key=api_key, model_names=model_names, temperature=temperature)

        self._base_url = base_url
        self._client = None
        self._openai = None
        self._initialize_client()

        logger.info(f"GroqClient initialized | Models: {len(self._model_names)}")

    def _initialize_client(self) -> None:
        """
        Initialize the OpenAI SDK client.

        SDK-level retries are disabled: a 429 must move on to the next
        model instead of being retried against the same one.
        """
        try:
            import openai

            self._openai = openai
            self._client = openai.OpenAI(
                api_key=self._api_key, base_url=self._base_url, max_retries=0
            )

        except ImportError:
            raise ConfigurationError(
                "openai package not installed. Install with: pip install openai",
                context={"provider": "groq"},
            )

    # =========================================================================
    # STAGE 2: API CALL IMPLEMENTATION
    # =========================================================================

    def _call_model(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        response_label: Optional[str],
        timeout: Optional[float],
    ) -> str:
        """One chat completion call. Groq takes separate system/user messages."""
        request = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": max_output_tokens,
        }
        if timeout is not None:
            request["timeout"] = timeout

        completion = self._client.chat.completions.create(**request)

        if completion.choices:
            return completion.choices[0].message.content or ""
        return ""

    def _classify_sdk_error(self, error: BaseException) -> Optional[AttemptOutcome]:
        if self._openai is None:
            return None
        if isinstance(error, (self._openai.NotFoundError, self._openai.RateLimitError)):
            return AttemptOutcome.RETRYABLE
        if isinstance(error, self._openai.APIConnectionError):
            return AttemptOutcome.FATAL
        return None

    def _is_timeout_error(self, error: BaseException) -> bool:
        if self._openai is not None and isinstance(error, self._openai.APITimeoutError):
            return True
        return super()._is_timeout_error(error)

    # =========================================================================
    # STAGE 3: PROPERTIES
    # =========================================================================

    @property
    def provider_name(self) -> str:
        """Return provider name."""
        return "groq"
