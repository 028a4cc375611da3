"""
Domain Models for Clinical Documentation Generation

This module defines the core data structures used throughout the document
generation pipeline. Value objects are immutable dataclasses designed for:
    1. Type safety and IDE support
    2. Per-call ownership (created, consumed once, never mutated)
    3. Clear domain semantics

Model Hierarchy:
    PatientInfo        → Demographics supplied with each call
    GenerationRequest  → One generate/regenerate invocation
    TemplateContext    → Values for {{placeholder}} substitution
    PromptPair         → System/user prompt produced by the builder
    ProviderAttempt    → Tagged outcome of one model attempt
    GenerationResult   → Final text plus call metadata
    RateLimitEntry     → Mutable per-key counter owned by the limiter
    AdmissionResult    → Outcome of a rate limiter admission check
    ProviderStatus     → Health-check view of the active provider

Author: Shubham Singh
Date: December 2025
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple, Union

from clinical_documentation.core.enums import (
    AttemptOutcome,
    DocumentKind,
    GenerationMode,
)
from clinical_documentation.core.exceptions import ValidationError


# =============================================================================
# STAGE 1: PATIENT INFO
# =============================================================================


@dataclass(frozen=True)
class PatientInfo:
    """
    Patient demographics supplied per call.

    Attributes:
        name: Full patient name
        age: Age in years, None when unknown
        gender: Gender as recorded, None when unknown
        medical_record_number: MRN, None when not assigned

    Example:
        >>> PatientInfo(name="Jane Doe", age=54, gender="female").summary_line()
        'Patient: Jane Doe, Age: 54, Gender: female'
    """

    name: str
    age: Optional[int] = None
    gender: Optional[str] = None
    medical_record_number: Optional[str] = None

    def summary_line(self) -> str:
        """One-line demographics block used in prompts."""
        line = (
            f"Patient: {self.name}, "
            f"Age: {self.age if self.age is not None else 'N/A'}, "
            f"Gender: {self.gender or 'N/A'}"
        )
        if self.medical_record_number:
            line += f", MRN: {self.medical_record_number}"
        return line


# =============================================================================
# STAGE 2: GENERATION REQUEST
# =============================================================================


def _coerce_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        raise ValidationError(
            f"{field_name} must be one of {[m.value for m in enum_cls]}",
            context={field_name: value},
        )
    try:
        return enum_cls.from_string(value)
    except ValueError as e:
        raise ValidationError(str(e), context={field_name: value})


@dataclass(frozen=True)
class GenerationRequest:
    """
    A single generate or regenerate invocation.

    What it does:
        Bundles everything the orchestrator needs for one call. Created per
        invocation and consumed once.

    Attributes:
        transcript_or_content: Consultation transcript (generate) or the
            existing document text (regenerate)
        patient_info: Patient demographics
        document_kind: Discharge summary or case sheet
        specialty_key: Optional built-in specialty key (e.g. "cardiology")
        custom_template_body: Optional user template with {{placeholders}}
        include_code_suggestions: Ask for a trailing coding-suggestions section
        mode: GENERATE or REGENERATE
    """

    transcript_or_content: str
    patient_info: PatientInfo
    document_kind: DocumentKind
    specialty_key: Optional[str] = None
    custom_template_body: Optional[str] = None
    include_code_suggestions: bool = False
    mode: GenerationMode = GenerationMode.GENERATE

    def __post_init__(self):
        """
        Accept the string values ("case_sheet", "regenerate") for the enum fields.

        Raises:
            ValidationError: If a kind or mode is not recognized
        """
        object.__setattr__(
            self, "document_kind", _coerce_enum(DocumentKind, self.document_kind, "document_kind")
        )
        object.__setattr__(self, "mode", _coerce_enum(GenerationMode, self.mode, "mode"))

    def validate(self) -> None:
        """
        Check required input before any provider call.

        Raises:
            ValidationError: If the text or the patient name is blank
        """
        if not self.transcript_or_content or not self.transcript_or_content.strip():
            what = (
                "Consultation transcript"
                if self.mode == GenerationMode.GENERATE
                else "Existing document content"
            )
            raise ValidationError(
                f"{what} is required",
                context={"mode": self.mode.value, "document_kind": self.document_kind.value},
            )

        if not self.patient_info.name or not self.patient_info.name.strip():
            raise ValidationError("Patient name is required", context={"field": "patient_info.name"})


# =============================================================================
# STAGE 3: TEMPLATE CONTEXT
# =============================================================================


@dataclass(frozen=True)
class TemplateContext:
    """
    Values available to custom template placeholders.

    Attributes map one-to-one onto the recognized placeholder names:
        patient_name          → {{patientName}}
        patient_age           → {{patientAge}}
        patient_gender        → {{patientGender}}
        medical_record_number → {{medicalRecordNumber}}
        consultation_date     → {{consultationDate}}
        doctor_name           → {{doctorName}}
    """

    patient_name: str
    consultation_date: Union[date, datetime, str]
    patient_age: Optional[int] = None
    patient_gender: Optional[str] = None
    medical_record_number: Optional[str] = None
    doctor_name: Optional[str] = None

    @classmethod
    def from_patient(
        cls,
        patient_info: PatientInfo,
        consultation_date: Union[date, datetime, str],
        doctor_name: Optional[str] = None,
    ) -> "TemplateContext":
        """Build a context from the demographics already attached to a request."""
        return cls(
            patient_name=patient_info.name,
            patient_age=patient_info.age,
            patient_gender=patient_info.gender,
            medical_record_number=patient_info.medical_record_number,
            consultation_date=consultation_date,
            doctor_name=doctor_name,
        )


# =============================================================================
# STAGE 4: PROMPTS AND ATTEMPTS
# =============================================================================


@dataclass(frozen=True)
class PromptPair:
    """System and user prompt for one provider call."""

    system_prompt: str
    user_prompt: str
    response_label: str = ""


@dataclass(frozen=True)
class ProviderAttempt:
    """
    Tagged outcome of one model attempt.

    Used for fallback iteration and logging only; never persisted.
    """

    model_name: str
    outcome: AttemptOutcome
    text: Optional[str] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome == AttemptOutcome.SUCCESS


@dataclass(frozen=True)
class GenerationResult:
    """
    Generated or revised document text plus call metadata.

    Attributes:
        content: Plain text with embedded section headings
        document_kind: Kind that was generated
        mode: GENERATE or REGENERATE
        provider: Provider that produced the text
        prompt_version: Version of the prompt templates used
        remaining_quota: Admissions left in the caller's window, None if unthrottled
    """

    content: str
    document_kind: DocumentKind
    mode: GenerationMode
    provider: str
    prompt_version: str
    remaining_quota: Optional[int] = None
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "content": self.content,
            "document_kind": self.document_kind.value,
            "mode": self.mode.value,
            "provider": self.provider,
            "prompt_version": self.prompt_version,
            "remaining_quota": self.remaining_quota,
            "generated_at": self.generated_at.isoformat(),
        }


# =============================================================================
# STAGE 5: RATE LIMITING
# =============================================================================


@dataclass
class RateLimitEntry:
    """
    Mutable per-key counter for the fixed-window limiter.

    Created on the first request of a window, incremented on every
    request (denials included), hard-reset once the window expires.
    """

    key: str
    count: int
    window_reset_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.window_reset_at


@dataclass(frozen=True)
class AdmissionResult:
    """Outcome of a rate limiter admission check."""

    allowed: bool
    remaining: int
    retry_after: Optional[float] = None


# =============================================================================
# STAGE 6: HEALTH
# =============================================================================


@dataclass(frozen=True)
class ProviderStatus:
    """Health-check view of the active provider. Never fails the check."""

    provider: Optional[str]
    status: str
    models: Tuple[str, ...] = ()

    @property
    def is_configured(self) -> bool:
        return self.status == "configured"

    def to_dict(self) -> Dict[str, Any]:
        return {"provider": self.provider, "status": self.status, "models": list(self.models)}
