"""
Constants for Clinical Documentation Generation

This module defines constant values used throughout the document
generation pipeline. Constants are:
    1. Centralized for easy modification
    2. Type-hinted for IDE support
    3. Fixed at import time (not runtime tunable)

Constant Categories:
    SPECIALTY_GUIDANCE     → Built-in specialty instruction table
    REQUIRED_SECTIONS      → Ordered section list per document kind
    DEFAULT_*_MODELS       → Ordered candidate models per provider
    MAX_OUTPUT_TOKENS      → Token ceiling per (kind, mode)
    RATE_LIMIT_*           → Fixed-window throttling constants

Author: Shubham Singh
Date: December 2025
"""

from typing import Dict, Tuple

from clinical_documentation.core.enums import DocumentKind, GenerationMode, Specialty


PROMPT_VERSION = "1.0"


# =============================================================================
# STAGE 1: SPECIALTY GUIDANCE
# =============================================================================
# Short instruction text steering the document toward a subdomain.

SPECIALTY_GUIDANCE: Dict[str, str] = {
    Specialty.CARDIOLOGY.value: (
        "This is a cardiology case. Focus on cardiovascular examination, "
        "cardiac history, and cardiac-specific findings."
    ),
    Specialty.SURGERY.value: (
        "This is a surgical case. Focus on surgical history, pre-operative "
        "assessment, and surgical findings."
    ),
    Specialty.PEDIATRICS.value: (
        "This is a pediatric case. Use age-appropriate terminology and focus on "
        "pediatric-specific considerations."
    ),
    Specialty.ORTHOPEDICS.value: (
        "This is an orthopedic case. Focus on musculoskeletal examination, "
        "range of motion, and orthopedic findings."
    ),
    Specialty.NEUROLOGY.value: (
        "This is a neurology case. Focus on neurological examination, mental "
        "status, and neurological findings."
    ),
    Specialty.GENERAL.value: (
        "This is a general medicine case. Use standard medical documentation format."
    ),
}

SPECIALTY_PREFIX = "Specialty Template: "

DEFAULT_SPECIALTY_INSTRUCTION = "Use standard medical documentation format."


# =============================================================================
# STAGE 2: REQUIRED SECTIONS
# =============================================================================
# Order matters: it is the order the provider is asked to follow.

REQUIRED_SECTIONS: Dict[DocumentKind, Tuple[str, ...]] = {
    DocumentKind.DISCHARGE_SUMMARY: (
        "Patient Demographics",
        "Chief Complaint",
        "History of Present Illness",
        "Past Medical History (if mentioned)",
        "Physical Examination",
        "Assessment/Diagnosis",
        "Treatment Provided",
        "Medications (if any)",
        "Discharge Instructions",
        "Follow-up Plan",
    ),
    DocumentKind.CASE_SHEET: (
        "Patient Demographics",
        "Chief Complaint",
        "History of Present Illness",
        "Past Medical History",
        "Family/Social History (if mentioned)",
        "Review of Systems",
        "Physical Examination (detailed)",
        "Vital Signs",
        "Lab/Diagnostic findings (if mentioned)",
        "Assessment/Diagnosis",
        "Plan/Treatment",
        "Medications",
        "Follow-up",
    ),
}

NO_PLACEHOLDERS_INSTRUCTION = (
    "Be professional, accurate, and complete. No placeholders."
)

CODE_SUGGESTIONS_HEADING = "ICD-10 Codes (suggested):"

CODE_SUGGESTIONS_INSTRUCTION = (
    f'At the end, add a section "{CODE_SUGGESTIONS_HEADING}" '
    "with relevant codes where applicable."
)

# Completion cue appended by providers that take one combined prompt.
RESPONSE_LABELS: Dict[Tuple[DocumentKind, GenerationMode], str] = {
    (DocumentKind.DISCHARGE_SUMMARY, GenerationMode.GENERATE): "Discharge Summary:",
    (DocumentKind.CASE_SHEET, GenerationMode.GENERATE): "Case Sheet:",
    (DocumentKind.DISCHARGE_SUMMARY, GenerationMode.REGENERATE): "Revised Summary:",
    (DocumentKind.CASE_SHEET, GenerationMode.REGENERATE): "Revised Case Sheet:",
}


# =============================================================================
# STAGE 3: PROVIDER MODELS
# =============================================================================
# Most capable / most likely available first. Later entries are weaker,
# cheaper fallbacks and must only be tried in this order.

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

DEFAULT_GROQ_MODELS: Tuple[str, ...] = (
    "llama-3.3-70b-versatile",
    "llama-3.1-70b-versatile",
    "llama-3.1-8b-instant",
    "mixtral-8x7b-32768",
    "llama3-70b-8192",
    "llama3-8b-8192",
)

DEFAULT_GEMINI_MODELS: Tuple[str, ...] = (
    "gemini-1.5-flash",
    "gemini-1.5-flash-latest",
    "gemini-1.0-pro",
    "gemini-1.5-pro",
    "gemini-pro",
    "gemini-2.0-flash",
)

GENERATION_TEMPERATURE = 0.3


# =============================================================================
# STAGE 4: TOKEN CEILINGS
# =============================================================================

MAX_OUTPUT_TOKENS: Dict[Tuple[DocumentKind, GenerationMode], int] = {
    (DocumentKind.DISCHARGE_SUMMARY, GenerationMode.GENERATE): 2000,
    (DocumentKind.CASE_SHEET, GenerationMode.GENERATE): 2500,
    (DocumentKind.DISCHARGE_SUMMARY, GenerationMode.REGENERATE): 2500,
    (DocumentKind.CASE_SHEET, GenerationMode.REGENERATE): 3000,
}


# =============================================================================
# STAGE 5: RATE LIMITING
# =============================================================================

RATE_LIMIT_WINDOW_SECONDS = 60.0
RATE_LIMIT_MAX_REQUESTS = 20
DOCUMENT_GENERATION_PURPOSE = "docgen"
DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0
