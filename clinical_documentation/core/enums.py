"""
Enumerations for Clinical Documentation Generation

This module defines all enumeration types used throughout the document
generation pipeline.

Enumeration Categories:
    DocumentKind     → Types of clinical documents that can be generated
    GenerationMode   → Fresh generation vs. revision of existing content
    Specialty        → Built-in specialty guidance keys
    LLMProvider      → Text generation providers
    AttemptOutcome   → Tagged outcome of a single model attempt

Author: Shubham Singh
Date: December 2025
"""

from enum import Enum


# =============================================================================
# STAGE 1: DOCUMENT KIND ENUMERATION
# =============================================================================


class DocumentKind(str, Enum):
    """
    Types of clinical documents that can be generated.

    What it does:
        Selects the required section list, system prompt and token
        ceiling used for a generation call.
    """

    DISCHARGE_SUMMARY = "discharge_summary"
    """
    Summary of the encounter on discharge.
    Sections: demographics through discharge instructions and follow-up.
    """

    CASE_SHEET = "case_sheet"
    """
    Detailed case record.
    Sections: demographics, histories, ROS, exam, vitals, labs, plan.
    """

    @property
    def display_name(self) -> str:
        """Human-readable name, e.g. 'discharge summary'."""
        return self.value.replace("_", " ")

    @classmethod
    def get_all_types(cls) -> list:
        """Return all document kind values as a list."""
        return [kind.value for kind in cls]

    @classmethod
    def from_string(cls, value: str) -> "DocumentKind":
        """
        Convert string to DocumentKind with case-insensitive matching.

        Args:
            value: String representation ("case-sheet", "Discharge Summary", ...)

        Returns:
            Matching DocumentKind enum member

        Raises:
            ValueError: If string doesn't match any document kind
        """
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ValueError(
            f"Unknown document kind: '{value}'. Valid kinds: {cls.get_all_types()}"
        )


# =============================================================================
# STAGE 2: GENERATION MODE ENUMERATION
# =============================================================================


class GenerationMode(str, Enum):
    """Whether text is generated from a transcript or revised in place."""

    GENERATE = "generate"
    REGENERATE = "regenerate"

    @classmethod
    def from_string(cls, value: str) -> "GenerationMode":
        normalized = value.strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(
            f"Unknown generation mode: '{value}'. Valid modes: {[m.value for m in cls]}"
        )


# =============================================================================
# STAGE 3: SPECIALTY ENUMERATION
# =============================================================================


class Specialty(str, Enum):
    """
    Built-in specialty guidance keys.

    Custom templates bypass this table entirely; their substituted
    body is used as the specialty instruction verbatim.
    """

    CARDIOLOGY = "cardiology"
    SURGERY = "surgery"
    PEDIATRICS = "pediatrics"
    ORTHOPEDICS = "orthopedics"
    NEUROLOGY = "neurology"
    GENERAL = "general"


# =============================================================================
# STAGE 4: PROVIDER ENUMERATION
# =============================================================================


class LLMProvider(str, Enum):
    """
    Text generation providers.

    Exactly one is active per pipeline; there is no cross-provider fallback.
    """

    GROQ = "groq"
    """Primary provider: OpenAI-compatible API, free tier, fast inference."""

    GEMINI = "gemini"
    """Secondary provider, used when no Groq key is configured."""

    @classmethod
    def from_string(cls, value: str) -> "LLMProvider":
        normalized = value.strip().lower()
        for provider in cls:
            if provider.value == normalized:
                return provider
        raise ValueError(
            f"Unknown LLM provider: '{value}'. Valid providers: {[p.value for p in cls]}"
        )


# =============================================================================
# STAGE 5: ATTEMPT OUTCOME ENUMERATION
# =============================================================================


class AttemptOutcome(str, Enum):
    """
    Tagged outcome of one model attempt inside the fallback loop.

    SUCCESS:   non-empty text returned, stop iterating
    RETRYABLE: model not found or rate/quota exceeded, try the next model
    FATAL:     anything else, abort the chain
    """

    SUCCESS = "SUCCESS"
    RETRYABLE = "RETRYABLE"
    FATAL = "FATAL"
