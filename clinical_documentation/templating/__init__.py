"""
Templating Layer - Custom Template Variable Substitution

Resolves {{placeholder}} tokens in user-authored template bodies before the
body is used as specialty guidance for generation.

Submodules:
    template_variables.py → substitute_template_variables() and helpers

Dependency Rule:
    This layer depends on: core
    This layer is used by: pipeline (orchestrator)

Author: Shubham Singh
Date: December 2025
"""

from clinical_documentation.templating.template_variables import (
    RECOGNIZED_TEMPLATE_VARIABLES,
    find_template_variables,
    format_consultation_date,
    substitute_template_variables,
    unknown_template_variables,
)

__all__ = [
    "RECOGNIZED_TEMPLATE_VARIABLES",
    "find_template_variables",
    "format_consultation_date",
    "substitute_template_variables",
    "unknown_template_variables",
]
