"""
Domain Exceptions for Clinical Documentation Generation

This module defines all custom exceptions used throughout the document
generation pipeline. Well-defined exceptions enable:
    1. Clear separation of caller errors, throttling and provider failures
    2. Specific catch blocks for different failure modes
    3. Rich error context for troubleshooting

Exception Hierarchy:
    ClinicalDocumentationError (base)
    ├── ConfigurationError          → Invalid configuration
    ├── ValidationError             → Malformed or missing input
    ├── RateLimitedError            → Per-user quota exceeded
    └── GenerationError             → Document generation failures
        ├── PromptError
        └── LLMError
            ├── ProviderUnavailableError  (retryable by model fallback)
            ├── ProviderFatalError        (abort the chain)
            │   └── GenerationTimeoutError
            └── GenerationExhaustedError  (every model was unavailable)

Usage:
    from clinical_documentation.core.exceptions import RateLimitedError

    try:
        result = pipeline.run(request, user_id="doctor-1")
    except RateLimitedError:
        return "Too many requests. Please try again later."

Author: Shubham Singh
Date: December 2025
"""

from typing import List, Optional


# =============================================================================
# STAGE 1: BASE EXCEPTION
# =============================================================================
# All domain exceptions inherit from this base class.


class ClinicalDocumentationError(Exception):
    """
    Base exception for all clinical documentation errors.

    What it does:
        Provides a common base class for all domain-specific exceptions,
        enabling catch-all handling while preserving specific error types.

    Attributes:
        message: Human-readable error description
        context: Dictionary of additional context for debugging
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format message with context for display."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


# =============================================================================
# STAGE 2: CALLER-FACING ERRORS
# =============================================================================
# Errors the caller can act on directly. Never retried internally.


class ConfigurationError(ClinicalDocumentationError):
    """
    Error in pipeline configuration.

    When raised:
        - No provider API key configured
        - Unknown provider name
        - Empty model list
    """

    pass


class ValidationError(ClinicalDocumentationError):
    """
    Malformed or missing input.

    When raised:
        - Empty transcript when generating
        - Empty existing content when regenerating
        - Missing patient name
        - Non-positive token ceiling

    Reported to the caller verbatim.
    """

    pass


class RateLimitedError(ClinicalDocumentationError):
    """
    Per-user document generation quota exceeded.

    Reported distinctly from other failures so the caller can surface a
    "try again later" message. Never retried silently.

    Attributes:
        user_id: The throttled user
        retry_after: Seconds until the current window resets
    """

    def __init__(self, user_id: str, retry_after: Optional[float] = None):
        self.user_id = user_id
        self.retry_after = retry_after
        super().__init__(
            "Too many document generation requests. Please try again later.",
            context={
                "user_id": user_id,
                "retry_after": round(retry_after, 1) if retry_after is not None else None,
            },
        )


# =============================================================================
# STAGE 3: GENERATION ERRORS
# =============================================================================


class GenerationError(ClinicalDocumentationError):
    """
    Base exception for document generation errors.

    Everything the orchestrator raises after input validation and
    admission derives from this class.
    """

    pass


class PromptError(GenerationError):
    """
    Error constructing a generation prompt.

    When raised:
        - Unsupported document kind or mode
    """

    pass


class LLMError(GenerationError):
    """
    Error from a text generation provider.

    Attributes:
        provider: The provider (groq, gemini)
        original_error: The wrapped SDK exception
    """

    def __init__(
        self,
        message: str,
        provider: str,
        original_error: Optional[BaseException] = None,
        context: Optional[dict] = None,
    ):
        self.provider = provider
        self.original_error = original_error
        merged = {
            "provider": provider,
            "original_error": str(original_error) if original_error else None,
        }
        merged.update(context or {})
        super().__init__(message, context=merged)


class ProviderUnavailableError(LLMError):
    """
    Model not found or rate/quota exceeded.

    Handled inside the provider client by moving to the next model.
    Invisible to callers unless the whole model list is exhausted.
    """

    def __init__(
        self,
        provider: str,
        model_name: str,
        original_error: Optional[BaseException] = None,
    ):
        self.model_name = model_name
        super().__init__(
            f"Model {model_name} unavailable on {provider}",
            provider=provider,
            original_error=original_error,
            context={"model": model_name},
        )


class ProviderFatalError(LLMError):
    """
    Authentication, configuration, request or network failure.

    Aborts the model chain immediately. The underlying reason is kept
    on ``original_error`` for diagnostics.
    """

    def __init__(
        self,
        message: str,
        provider: str,
        model_name: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.model_name = model_name
        super().__init__(
            message,
            provider=provider,
            original_error=original_error,
            context={"model": model_name},
        )


class GenerationTimeoutError(ProviderFatalError):
    """
    The caller-supplied deadline for the whole model chain expired.

    Attributes:
        timeout_seconds: The timeout that was exceeded
    """

    def __init__(
        self,
        provider: str,
        timeout_seconds: float,
        model_name: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Generation timed out after {timeout_seconds}s",
            provider=provider,
            model_name=model_name,
            original_error=original_error,
        )


class GenerationExhaustedError(LLMError):
    """
    Every candidate model failed with a retryable reason.

    Attributes:
        attempts: ProviderAttempt records, in the order they were made
        last_reason: The last retryable error observed
    """

    def __init__(
        self,
        provider: str,
        attempts: List,
        last_reason: Optional[BaseException] = None,
    ):
        self.attempts = list(attempts)
        self.last_reason = last_reason
        super().__init__(
            f"No {provider} model available after {len(self.attempts)} attempt(s)",
            provider=provider,
            original_error=last_reason,
            context={"models_tried": [a.model_name for a in self.attempts]},
        )
