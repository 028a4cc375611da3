"""
Gemini Client - Secondary Provider (Google Gemini API)

This module provides the concrete TextCompletionProvider for Google's Gemini
models. Gemini is only active when no Groq key is configured (or when
LLM_PROVIDER=gemini).

Gemini receives one combined prompt:
    "<system prompt>\\n\\n<user prompt>\\n\\n<response label>"

Author: Shubham Singh
Date: December 2025
"""

from typing import Dict, Optional, Sequence

from loguru import logger

from clinical_documentation.clients.llm_client import BaseLLMClient
from clinical_documentation.core.constants import (
    DEFAULT_GEMINI_MODELS,
    GENERATION_TEMPERATURE,
)
from clinical_documentation.core.enums import AttemptOutcome
from clinical_documentation.core.exceptions import ConfigurationError, ProviderFatalError


# No blocking for any harm category.
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


def build_combined_prompt(
    system_prompt: str, user_prompt: str, response_label: Optional[str] = None
) -> str:
    """Join system prompt, user prompt and completion cue into one prompt."""
    parts = [system_prompt, user_prompt]
    if response_label:
        parts.append(response_label)
    return "\n\n".join(parts)


# =============================================================================
# STAGE 1: GEMINI CLIENT IMPLEMENTATION
# =============================================================================


class GeminiClient(BaseLLMClient):
    """
    Google Gemini API client for document generation.

    What it does:
        Sends one combined prompt to each candidate model in turn via the
        google-generativeai library.

    Default Models (in fallback order):
        gemini-1.5-flash → ... → gemini-2.0-flash

    Example:
        >>> client = GeminiClient(api_key="...")
        >>> text = client.complete(system_prompt, user_prompt, 2000,
        ...                        response_label="Discharge Summary:")
    """

    def __init__(
        self,
        api_key: str,
        model_names: Sequence[str] = DEFAULT_GEMINI_MODELS,
        temperature: float = GENERATION_TEMPERATURE,
    ):
        """
        Initialize Gemini client.

        STAGE 1.1: Initialize base class
        STAGE 1.2: Configure Gemini SDK

        Args:
            api_key: Google API key (Gemini)
            model_names: Ordered candidate models
            temperature: Sampling temperature
        """
        super().__init__(api_key=api_key, model_names=model_names, temperature=temperature)

        self._genai = None
        self._google_exceptions = None
        self._models: Dict[str, object] = {}
        self._initialize_client()

        logger.info(f"GeminiClient initialized | Models: {len(self._model_names)}")

    def _initialize_client(self) -> None:
        """
        Configure the Gemini SDK.

        Lazy import to avoid requiring google-generativeai at module load.
        """
        try:
            import google.generativeai as genai
            from google.api_core import exceptions as google_exceptions

            genai.configure(api_key=self._api_key)
            self._genai = genai
            self._google_exceptions = google_exceptions

        except ImportError:
            raise ConfigurationError(
                "google-generativeai package not installed. "
                "Install with: pip install google-generativeai",
                context={"provider": "gemini"},
            )

    def _get_model(self, model: str):
        """GenerativeModel handle for one model name, created once."""
        if model not in self._models:
            self._models[model] = self._genai.GenerativeModel(
                model_name=model, safety_settings=SAFETY_SETTINGS
            )
        return self._models[model]

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
        """One generate_content call against one Gemini model."""
        kwargs = {
            "generation_config": {
                "temperature": self._temperature,
                "max_output_tokens": max_output_tokens,
            }
        }
        if timeout is not None:
            kwargs["request_options"] = {"timeout": timeout}

        response = self._get_model(model).generate_content(
            build_combined_prompt(system_prompt, user_prompt, response_label), **kwargs
        )

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            raise ProviderFatalError(
                f"Content blocked by gemini safety settings: {feedback.block_reason}",
                provider=self.provider_name,
                model_name=model,
            )

        # response.text raises when the candidate has no text parts
        for candidate in response.candidates or []:
            content = getattr(candidate, "content", None)
            if content and content.parts:
                return "".join(getattr(part, "text", "") for part in content.parts)
        return ""

    def _classify_sdk_error(self, error: BaseException) -> Optional[AttemptOutcome]:
        exc = self._google_exceptions
        if exc is None:
            return None
        if isinstance(error, (exc.NotFound, exc.ResourceExhausted, exc.TooManyRequests)):
            return AttemptOutcome.RETRYABLE
        if isinstance(error, exc.GoogleAPICallError):
            return AttemptOutcome.FATAL
        return None

    def _is_timeout_error(self, error: BaseException) -> bool:
        exc = self._google_exceptions
        if exc is not None and isinstance(error, exc.DeadlineExceeded):
            return True
        return super()._is_timeout_error(error)

    # =========================================================================
    # STAGE 3: PROPERTIES
    # =========================================================================

    @property
    def provider_name(self) -> str:
        """Return provider name."""
        return "gemini"
