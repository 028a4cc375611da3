"""
Generation Layer - Prompt Construction

This layer turns a generation request into the system/user prompts sent to
the active text completion provider.

Submodules:
    prompt_builder.py → PromptBuilder and specialty resolution

Dependency Rule:
    This layer depends on: core
    This layer is used by: pipeline (orchestrator)

Author: Shubham Singh
Date: December 2025
"""

from clinical_documentation.generation.prompt_builder import (
    PromptBuilder,
    resolve_specialty_instruction,
)

__all__ = [
    "PromptBuilder",
    "resolve_specialty_instruction",
]
