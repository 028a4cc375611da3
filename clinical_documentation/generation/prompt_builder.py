"""
Prompt Builder - Clinical Document Generation Prompts

This module constructs the system and user prompts for document generation
and regeneration. Prompts are designed to:
    1. Produce complete, professional prose with no placeholders
    2. Follow a fixed, ordered section structure per document kind
    3. Steer content toward a specialty when one is given

Why Separate Prompt Builder:
    1. Single Responsibility: prompt construction separate from provider calls
    2. Testability: prompts can be tested without LLM calls
    3. Versioning: PROMPT_VERSION tracks template changes

Pipeline Position:
    Request → Template substitution → [PromptBuilder] → Provider client
                                       ^^^^^^^^^^^^^^^
                                       You are here

Author: Shubham Singh
Date: December 2025
"""

from typing import Optional

from clinical_documentation.core.constants import (
    CODE_SUGGESTIONS_INSTRUCTION,
    DEFAULT_SPECIALTY_INSTRUCTION,
    NO_PLACEHOLDERS_INSTRUCTION,
    REQUIRED_SECTIONS,
    RESPONSE_LABELS,
    SPECIALTY_GUIDANCE,
    SPECIALTY_PREFIX,
)
from clinical_documentation.core.enums import DocumentKind, GenerationMode
from clinical_documentation.core.exceptions import PromptError
from clinical_documentation.core.models import GenerationRequest, PromptPair


# =============================================================================
# STAGE 1: PROMPT TEMPLATES
# =============================================================================

SYSTEM_PROMPT_TEMPLATE = (
    "You are a medical documentation specialist. Output only the {document} text, "
    "well-structured and ready for medical records."
)

REVISION_SYSTEM_PROMPT_TEMPLATE = (
    "You are a medical documentation specialist. Output only the revised {document} text."
)

GENERATION_PROMPT_TEMPLATE = """Generate a professional {document}.

{patient_block}

{specialty_block}

Consultation transcript:
{transcript}

Include: {sections}. {closing}"""

REVISION_PROMPT_TEMPLATE = """Revise and improve this {document}. Keep it professional and complete. Do not add placeholders.

{patient_block}

{specialty_block}

Current {document}:
{existing_content}

Output the revised {document} only, with the same structure ({sections}). Fix any errors, improve clarity, and ensure medical accuracy."""


def resolve_specialty_instruction(specialty_key: Optional[str]) -> str:
    """
    Look up built-in specialty guidance.

    Args:
        specialty_key: Key such as "cardiology". Case-insensitive.

    Returns:
        "Specialty Template: ..." for a known key, otherwise the generic
        standard-format instruction
    """
    if specialty_key:
        guidance = SPECIALTY_GUIDANCE.get(specialty_key.strip().lower())
        if guidance:
            return f"{SPECIALTY_PREFIX}{guidance}"
    return DEFAULT_SPECIALTY_INSTRUCTION


# =============================================================================
# STAGE 2: PROMPT BUILDER CLASS
# =============================================================================


class PromptBuilder:
    """
    Constructs prompts for clinical document generation.

    What it does:
        Takes a GenerationRequest and produces the PromptPair sent to the
        active provider: a short system prompt and a user prompt with
        demographics, specialty guidance, source text and section list.

    Example:
        >>> builder = PromptBuilder()
        >>> prompts = builder.build_prompt(DocumentKind.CASE_SHEET, request)
        >>> print(prompts.user_prompt)
    """

    def build_prompt(
        self,
        kind: DocumentKind,
        request: GenerationRequest,
        specialty_instruction: Optional[str] = None,
    ) -> PromptPair:
        """
        Build the complete prompt pair for one call.

        STAGE 2.1: Resolve specialty guidance
        STAGE 2.2: Pick generation or revision template
        STAGE 2.3: Assemble system and user prompts

        Args:
            kind: Document kind to produce
            request: The generation request (mode decides the template)
            specialty_instruction: Already-substituted custom template text.
                Used verbatim when given; the built-in table is skipped.

        Returns:
            PromptPair ready for a provider client

        Raises:
            PromptError: If the kind has no section structure
        """
        # =====================================================================
        # STAGE 2.1: RESOLVE SPECIALTY GUIDANCE
        # =====================================================================
        if specialty_instruction is not None:
            specialty_block = specialty_instruction
        else:
            specialty_block = resolve_specialty_instruction(request.specialty_key)

        sections = self.required_sections(kind)
        document = kind.display_name
        patient_block = request.patient_info.summary_line()

        # =====================================================================
        # STAGE 2.2: GENERATION OR REVISION
        # =====================================================================
        if request.mode == GenerationMode.REGENERATE:
            system_prompt = REVISION_SYSTEM_PROMPT_TEMPLATE.format(document=document)
            user_prompt = REVISION_PROMPT_TEMPLATE.format(
                document=document,
                patient_block=patient_block,
                specialty_block=specialty_block,
                existing_content=request.transcript_or_content,
                sections=", ".join(sections),
            )
            if request.include_code_suggestions:
                user_prompt = f"{user_prompt} {CODE_SUGGESTIONS_INSTRUCTION}"
        else:
            closing = NO_PLACEHOLDERS_INSTRUCTION
            if request.include_code_suggestions:
                closing = f"{closing} {CODE_SUGGESTIONS_INSTRUCTION}"

            system_prompt = SYSTEM_PROMPT_TEMPLATE.format(document=document)
            user_prompt = GENERATION_PROMPT_TEMPLATE.format(
                document=document,
                patient_block=patient_block,
                specialty_block=specialty_block,
                transcript=request.transcript_or_content,
                sections=", ".join(sections),
                closing=closing,
            )

        # =====================================================================
        # STAGE 2.3: ASSEMBLE
        # =====================================================================
        return PromptPair(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            response_label=RESPONSE_LABELS.get((kind, request.mode), ""),
        )

    def required_sections(self, kind: DocumentKind) -> tuple:
        """Ordered section names the provider is asked to produce."""
        try:
            return REQUIRED_SECTIONS[kind]
        except KeyError:
            raise PromptError(
                f"No section structure defined for {kind}",
                context={"document_kind": str(kind)},
            )
