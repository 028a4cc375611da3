"""
Template Variables - {{placeholder}} Substitution for Custom Templates

Custom templates are user-authored document skeletons. Before a template is
used as generation guidance, its placeholders are resolved against the
patient and consultation the document is being generated for.

Recognized Placeholders:
    {{patientName}}          → patient full name
    {{patientAge}}           → age in years, "N/A" when unknown
    {{patientGender}}        → gender, "N/A" when unknown
    {{medicalRecordNumber}}  → MRN, "N/A" when not assigned
    {{consultationDate}}     → consultation date, e.g. "Mar 05, 2024"
    {{doctorName}}           → doctor name, "" when unknown

Unknown placeholders are left in the text exactly as written.

Pipeline Position:
    Template body → [substitute_template_variables] → PromptBuilder
                     ^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^
                     You are here

Author: Shubham Singh
Date: December 2025
"""

import re
from datetime import date, datetime
from typing import Callable, Dict, List, Union

from clinical_documentation.core.models import TemplateContext


# =============================================================================
# STAGE 1: PLACEHOLDER TABLE
# =============================================================================

TEMPLATE_VARIABLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")

CONSULTATION_DATE_FORMAT = "%b %d, %Y"


def format_consultation_date(value: Union[date, datetime, str]) -> str:
    """
    Render a consultation date with the fixed human-readable format.

    ISO-8601 strings are parsed first ("2024-03-05", "2024-03-05T10:30:00Z").
    A string that is not ISO-8601 is returned unchanged.
    """
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return value
    return value.strftime(CONSULTATION_DATE_FORMAT)


_VARIABLE_RENDERERS: Dict[str, Callable[[TemplateContext], str]] = {
    "patientName": lambda ctx: ctx.patient_name,
    "patientAge": lambda ctx: str(ctx.patient_age) if ctx.patient_age is not None else "N/A",
    "patientGender": lambda ctx: ctx.patient_gender or "N/A",
    "medicalRecordNumber": lambda ctx: ctx.medical_record_number or "N/A",
    "consultationDate": lambda ctx: format_consultation_date(ctx.consultation_date),
    "doctorName": lambda ctx: ctx.doctor_name or "",
}

RECOGNIZED_TEMPLATE_VARIABLES = tuple(_VARIABLE_RENDERERS)


# =============================================================================
# STAGE 2: SUBSTITUTION
# =============================================================================


def substitute_template_variables(body: str, context: TemplateContext) -> str:
    """
    Replace recognized {{placeholders}} in a template body.

    Args:
        body: Template text containing {{identifier}} tokens
        context: Values for the recognized identifiers

    Returns:
        Template text with recognized tokens replaced and unknown tokens
        preserved verbatim

    Example:
        >>> ctx = TemplateContext(patient_name="Jane Doe", consultation_date="2024-03-05")
        >>> substitute_template_variables("{{patientName}} / {{ward}}", ctx)
        'Jane Doe / {{ward}}'
    """

    def lookup(match: "re.Match[str]") -> str:
        renderer = _VARIABLE_RENDERERS.get(match.group(1))
        if renderer is None:
            return match.group(0)
        return renderer(context)

    return TEMPLATE_VARIABLE_PATTERN.sub(lookup, body)


# =============================================================================
# STAGE 3: DIAGNOSTICS
# =============================================================================


def find_template_variables(body: str) -> List[str]:
    """All placeholder identifiers in a body, in first-seen order, de-duplicated."""
    seen: List[str] = []
    for name in TEMPLATE_VARIABLE_PATTERN.findall(body):
        if name not in seen:
            seen.append(name)
    return seen


def unknown_template_variables(body: str) -> List[str]:
    """Placeholder identifiers that substitution will leave untouched."""
    return [name for name in find_template_variables(body) if name not in _VARIABLE_RENDERERS]
