"""
Core Layer - Domain Models, Enums, Constants, and Configuration

This layer contains the foundation of the clinical documentation system.

Submodules:
    models.py     → Data structures (PatientInfo, GenerationRequest, ...)
    enums.py      → Enumerations (DocumentKind, GenerationMode, ...)
    constants.py  → Specialty table, section lists, model lists, ceilings
    config.py     → Configuration dataclass
    exceptions.py → Domain-specific exceptions

Dependency Rule:
    This layer depends on NOTHING else in the package.
    All other layers may depend on this layer.

Author: Shubham Singh
Date: December 2025
"""

from clinical_documentation.core.models import (
    PatientInfo,
    GenerationRequest,
    TemplateContext,
    PromptPair,
    ProviderAttempt,
    GenerationResult,
    RateLimitEntry,
    AdmissionResult,
    ProviderStatus,
)
from clinical_documentation.core.enums import (
    DocumentKind,
    GenerationMode,
    Specialty,
    LLMProvider,
    AttemptOutcome,
)
from clinical_documentation.core.config import PipelineConfiguration
from clinical_documentation.core.exceptions import (
    ClinicalDocumentationError,
    ConfigurationError,
    ValidationError,
    RateLimitedError,
    GenerationError,
    PromptError,
    LLMError,
    ProviderUnavailableError,
    ProviderFatalError,
    GenerationTimeoutError,
    GenerationExhaustedError,
)

__all__ = [
    # Models
    "PatientInfo",
    "GenerationRequest",
    "TemplateContext",
    "PromptPair",
    "ProviderAttempt",
    "GenerationResult",
    "RateLimitEntry",
    "AdmissionResult",
    "ProviderStatus",
    # Enums
    "DocumentKind",
    "GenerationMode",
    "Specialty",
    "LLMProvider",
    "AttemptOutcome",
    # Configuration
    "PipelineConfiguration",
    # Exceptions
    "ClinicalDocumentationError",
    "ConfigurationError",
    "ValidationError",
    "RateLimitedError",
    "GenerationError",
    "PromptError",
    "LLMError",
    "ProviderUnavailableError",
    "ProviderFatalError",
    "GenerationTimeoutError",
    "GenerationExhaustedError",
]
