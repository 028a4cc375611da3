"""
Text Completion Provider Protocol and Base Implementation

This module defines the interface every provider client exposes and a base
class implementing the ordered model fallback shared by all providers.

Protocol Pattern:
    - TextCompletionProvider defines the interface the pipeline depends on
    - BaseLLMClient implements model fallback and error classification
    - Concrete clients (GroqClient, GeminiClient) only make one API call

Fallback Policy:
    Models are tried strictly in list order, one at a time.
        SUCCESS   → return immediately, later models are never tried
        RETRYABLE → model not found / rate or quota exceeded, try the next
        FATAL     → anything else, abort the whole chain
    Exhausting the list raises GenerationExhaustedError with the last
    retryable reason.

Classification prefers structured signals (SDK exception types, HTTP status
codes). Error messages are only inspected when no structured code exists.

Author: Shubham Singh
Date: December 2025
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from loguru import logger

from clinical_documentation.core.constants import GENERATION_TEMPERATURE
from clinical_documentation.core.enums import AttemptOutcome
from clinical_documentation.core.exceptions import (
    ConfigurationError,
    GenerationExhaustedError,
    GenerationTimeoutError,
    ProviderFatalError,
    ProviderUnavailableError,
    ValidationError,
)
from clinical_documentation.core.models import ProviderAttempt


RETRYABLE_STATUS_CODES = frozenset({404, 429})

# Only consulted for errors that carry no status code.
RETRYABLE_MESSAGE_MARKERS = ("404", "429", "quota", "rate limit", "rate_limit", "not found")


# =============================================================================
# STAGE 1: PROVIDER PROTOCOL
# =============================================================================


@runtime_checkable
class TextCompletionProvider(Protocol):
    """
    Capability the generation pipeline depends on.

    Required Methods:
        complete(system_prompt, user_prompt, max_output_tokens) → text

    Properties:
        provider_name → "groq", "gemini", ...
        model_names   → ordered candidate models
    """

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        *,
        response_label: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Generate text, falling back across candidate models.

        Raises:
            ProviderFatalError: Non-retryable failure (chain aborted)
            GenerationExhaustedError: Every model was unavailable
        """
        ...

    @property
    def provider_name(self) -> str:
        ...

    @property
    def model_names(self) -> Sequence[str]:
        ...


# =============================================================================
# STAGE 2: BASE LLM CLIENT (ABSTRACT)
# =============================================================================


class BaseLLMClient(ABC):
    """
    Abstract base class for provider clients.

    What subclasses must implement:
        - _call_model(model, system_prompt, user_prompt, max_output_tokens,
          response_label, timeout): one API call, returns text or raises
          the SDK's exception
        - provider_name: property returning provider name

    What subclasses may override:
        - _classify_sdk_error(error): map SDK exception types to outcomes
        - _is_timeout_error(error): recognize SDK timeout types

    What base class provides:
        - Ordered first-success model fallback
        - Error classification into AttemptOutcome
        - Caller deadline across the whole chain
        - Logging and metrics (safe to share across threads)
    """

    def __init__(
        self,
        api_key: str,
        model_names: Sequence[str],
        temperature: float = GENERATION_TEMPERATURE,
    ):
        """
        Initialize base client.

        Args:
            api_key: API key for the provider
            model_names: Ordered candidate models, most capable first
            temperature: Sampling temperature for every attempt
        """
        if not model_names:
            raise ConfigurationError(
                "At least one candidate model is required",
                context={"provider": self.provider_name},
            )

        self._api_key = api_key
        self._model_names = tuple(model_names)
        self._temperature = temperature

        self._total_calls = 0
        self._failed_calls = 0
        self._last_attempts: List[ProviderAttempt] = []
        self._stats_lock = threading.Lock()

    # =========================================================================
    # STAGE 3: PUBLIC API
    # =========================================================================

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        *,
        response_label: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Generate text, trying candidate models in order until one succeeds.

        Algorithm:
            1. For each model in list order, make exactly one attempt
            2. SUCCESS → return the text
            3. FATAL → raise ProviderFatalError (or GenerationTimeoutError)
            4. RETRYABLE → continue with the next model
            5. List exhausted → raise GenerationExhaustedError

        Args:
            system_prompt: Instructions for the model
            user_prompt: Demographics, guidance and source text
            max_output_tokens: Output token ceiling for every attempt
            response_label: Completion cue for single-prompt providers
            timeout: Seconds allowed for the whole chain, None for no limit

        Returns:
            Generated text from the first successful model
        """
        if max_output_tokens <= 0:
            raise ValidationError(
                "max_output_tokens must be positive",
                context={"max_output_tokens": max_output_tokens},
            )

        attempts: List[ProviderAttempt] = []
        try:
            return self._run_chain(
                attempts, system_prompt, user_prompt, max_output_tokens, response_label, timeout
            )
        finally:
            self._record_call(attempts)

    def _run_chain(
        self,
        attempts: List[ProviderAttempt],
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        response_label: Optional[str],
        timeout: Optional[float],
    ) -> str:
        """Fallback loop. Appends every attempt to the caller-owned list."""
        deadline = time.monotonic() + timeout if timeout is not None else None
        last_retryable: Optional[BaseException] = None

        for model in self._model_names:
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise GenerationTimeoutError(
                        provider=self.provider_name, timeout_seconds=timeout, model_name=model
                    )

            attempt = self._attempt(
                model, system_prompt, user_prompt, max_output_tokens, response_label, remaining
            )
            attempts.append(attempt)

            if attempt.outcome == AttemptOutcome.SUCCESS:
                logger.info(
                    f"Generation succeeded | Provider: {self.provider_name} | "
                    f"Model: {model} | Attempts: {len(attempts)}"
                )
                return attempt.text

            if attempt.outcome == AttemptOutcome.FATAL:
                logger.error(
                    f"Fatal provider error | Provider: {self.provider_name} | "
                    f"Model: {model} | Error: {attempt.error}"
                )
                raise self._fatal_error(model, attempt.error, timeout)

            last_retryable = ProviderUnavailableError(
                provider=self.provider_name, model_name=model, original_error=attempt.error
            )
            logger.warning(
                f"Model unavailable, falling back | Provider: {self.provider_name} | "
                f"Model: {model} | Error: {attempt.error}"
            )

        raise GenerationExhaustedError(
            provider=self.provider_name, attempts=attempts, last_reason=last_retryable
        )

    def _record_call(self, attempts: List[ProviderAttempt]) -> None:
        """Publish one finished call's attempts and counts."""
        succeeded = sum(1 for a in attempts if a.succeeded)
        with self._stats_lock:
            self._total_calls += succeeded
            self._failed_calls += len(attempts) - succeeded
            self._last_attempts = list(attempts)

    # =========================================================================
    # STAGE 4: ATTEMPTS AND CLASSIFICATION
    # =========================================================================

    def _attempt(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        response_label: Optional[str],
        timeout: Optional[float],
    ) -> ProviderAttempt:
        """Make one call and turn its result into a tagged ProviderAttempt."""
        logger.debug(f"Attempting model | Provider: {self.provider_name} | Model: {model}")
        try:
            text = self._call_model(
                model, system_prompt, user_prompt, max_output_tokens, response_label, timeout
            )
        except Exception as e:
            return ProviderAttempt(model_name=model, outcome=self._classify_error(e), error=e)

        if not text or not text.strip():
            return ProviderAttempt(
                model_name=model,
                outcome=AttemptOutcome.FATAL,
                error=ProviderFatalError(
                    f"Empty response from {self.provider_name}",
                    provider=self.provider_name,
                    model_name=model,
                ),
            )

        return ProviderAttempt(model_name=model, outcome=AttemptOutcome.SUCCESS, text=text)

    def _classify_error(self, error: BaseException) -> AttemptOutcome:
        """
        Decide whether a failed attempt may fall back to the next model.

        Order of signals:
            1. Timeouts are always fatal
            2. Provider SDK exception types
            3. HTTP-like status code on the exception
            4. Message markers, only when no status code exists
        """
        if isinstance(error, ProviderFatalError) or self._is_timeout_error(error):
            return AttemptOutcome.FATAL

        sdk_outcome = self._classify_sdk_error(error)
        if sdk_outcome is not None:
            return sdk_outcome

        status = self._status_code(error)
        if status is not None:
            if status in RETRYABLE_STATUS_CODES:
                return AttemptOutcome.RETRYABLE
            return AttemptOutcome.FATAL

        message = str(error).lower()
        if any(marker in message for marker in RETRYABLE_MESSAGE_MARKERS):
            return AttemptOutcome.RETRYABLE
        return AttemptOutcome.FATAL

    def _classify_sdk_error(self, error: BaseException) -> Optional[AttemptOutcome]:
        """SDK-specific classification. None means 'no opinion'."""
        return None

    def _is_timeout_error(self, error: BaseException) -> bool:
        return isinstance(error, TimeoutError)

    @staticmethod
    def _status_code(error: BaseException) -> Optional[int]:
        for attr in ("status_code", "code"):
            value = getattr(error, attr, None)
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return None

    def _fatal_error(
        self, model: str, error: Optional[BaseException], timeout: Optional[float]
    ) -> ProviderFatalError:
        if isinstance(error, ProviderFatalError):
            return error
        if error is not None and self._is_timeout_error(error):
            return GenerationTimeoutError(
                provider=self.provider_name,
                timeout_seconds=timeout,
                model_name=model,
                original_error=error,
            )
        return ProviderFatalError(
            f"{self.provider_name} API error: {error}",
            provider=self.provider_name,
            model_name=model,
            original_error=error,
        )

    # =========================================================================
    # STAGE 5: ABSTRACT METHODS
    # =========================================================================

    @abstractmethod
    def _call_model(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_output_tokens: int,
        response_label: Optional[str],
        timeout: Optional[float],
    ) -> str:
        """
        Make exactly one API call against one model.

        Returns:
            Generated text (may be empty; the base class treats that as fatal)

        Raises:
            Any SDK exception; the base class classifies it
        """
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'groq', 'gemini')."""
        ...

    # =========================================================================
    # STAGE 6: PROPERTIES AND METRICS
    # =========================================================================

    @property
    def model_names(self) -> tuple:
        """Ordered candidate models."""
        return self._model_names

    @property
    def last_attempts(self) -> List[ProviderAttempt]:
        """Attempts of the most recently finished complete() call."""
        return list(self._last_attempts)

    @property
    def total_calls(self) -> int:
        """Number of complete() calls that returned text."""
        return self._total_calls

    @property
    def failed_calls(self) -> int:
        """Number of failed model attempts."""
        return self._failed_calls

    @property
    def success_rate(self) -> float:
        """Percentage of attempts that succeeded."""
        total = self._total_calls + self._failed_calls
        if total == 0:
            return 100.0
        return (self._total_calls / total) * 100
