"""
Clinical Documentation Module

Generates discharge summaries and case sheets from consultation transcripts
(and revises existing ones) through a single hosted LLM provider with
ordered model fallback and per-user rate limiting.

Architecture Overview:
    clinical_documentation/
    ├── core/            → Domain models, enums, configuration (Layer 0 - Pure)
    ├── templating/      → {{placeholder}} substitution (Layer 1 - Business Logic)
    ├── generation/      → Prompt construction (Layer 2 - Business Logic)
    ├── clients/         → Groq / Gemini clients with fallback (Layer 3 - Infrastructure)
    ├── throttling/      → Fixed-window rate limiter (Layer 3 - Infrastructure)
    ├── logging_setup.py → loguru sink configuration
    └── pipeline.py      → Main orchestrator (Layer 4 - Public API)

Quick Start:
    from clinical_documentation import DocumentGenerationPipeline, PatientInfo

    pipeline = DocumentGenerationPipeline.from_environment()
    text = pipeline.generate_case_sheet(transcript, PatientInfo(name="Jane Doe"))

Author: Shubham Singh
Date: December 2025
"""

__version__ = "1.0.0"
__author__ = "Shubham Singh"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================

# Main Entry Point
from clinical_documentation.pipeline import DocumentGenerationPipeline

# Core Models
from clinical_documentation.core.models import (
    PatientInfo,
    GenerationRequest,
    TemplateContext,
    GenerationResult,
    ProviderStatus,
)

# Enums
from clinical_documentation.core.enums import (
    DocumentKind,
    GenerationMode,
    Specialty,
    LLMProvider,
)

# Configuration
from clinical_documentation.core.config import PipelineConfiguration
from clinical_documentation.logging_setup import configure_logging

# Errors callers are expected to handle
from clinical_documentation.core.exceptions import (
    ClinicalDocumentationError,
    ConfigurationError,
    ValidationError,
    RateLimitedError,
    GenerationError,
)

# Building blocks
from clinical_documentation.templating import substitute_template_variables
from clinical_documentation.throttling import RateLimiter

__all__ = [
    # Main Entry Point (use this!)
    "DocumentGenerationPipeline",
    # Core Models
    "PatientInfo",
    "GenerationRequest",
    "TemplateContext",
    "GenerationResult",
    "ProviderStatus",
    # Enums
    "DocumentKind",
    "GenerationMode",
    "Specialty",
    "LLMProvider",
    # Configuration
    "PipelineConfiguration",
    "configure_logging",
    # Errors
    "ClinicalDocumentationError",
    "ConfigurationError",
    "ValidationError",
    "RateLimitedError",
    "GenerationError",
    # Building blocks
    "substitute_template_variables",
    "RateLimiter",
]
