"""
Clinical Documentation Pipeline - Generation Orchestrator

This is the PUBLIC API entry point for document generation. It coordinates
the layers (throttling, templating, prompt building, provider client) behind
a small set of operations.

Architecture Diagram:
    ┌─────────────────────────────────────────────────────────────────────┐
    │                    DocumentGenerationPipeline                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  ┌────────────┐   ┌────────────┐   ┌────────────┐   ┌────────────┐  │
    │  │RateLimiter │ → │ Templating │ → │PromptBuild.│ → │ Provider   │  │
    │  └────────────┘   └────────────┘   └────────────┘   └────────────┘  │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Operations:
    generate()    → document from a consultation transcript
    regenerate()  → revised document from existing content
    run()         → full request path: admission, validation, custom
                    template substitution, then generate/regenerate

The pipeline never retries on its own. Model fallback happens inside the
provider client; caller-level retries belong to the surrounding system.

Usage:
    from clinical_documentation import DocumentGenerationPipeline, PatientInfo

    pipeline = DocumentGenerationPipeline.from_environment()
    text = pipeline.generate_discharge_summary(
        transcript, PatientInfo(name="Jane Doe", age=54, gender="female"),
        specialty="cardiology",
    )

Author: Shubham Singh
Date: December 2025
"""

from datetime import date
from typing import Optional, Union

from loguru import logger

from clinical_documentation.clients import TextCompletionProvider, create_llm_client
from clinical_documentation.core.config import PipelineConfiguration
from clinical_documentation.core.constants import MAX_OUTPUT_TOKENS, PROMPT_VERSION
from clinical_documentation.core.enums import DocumentKind, GenerationMode
from clinical_documentation.core.exceptions import ConfigurationError, PromptError, ValidationError
from clinical_documentation.core.models import (
    GenerationRequest,
    GenerationResult,
    PatientInfo,
    ProviderStatus,
    TemplateContext,
)
from clinical_documentation.generation import PromptBuilder
from clinical_documentation.templating import substitute_template_variables
from clinical_documentation.throttling import RateLimiter


# =============================================================================
# STAGE 1: PIPELINE CLASS
# =============================================================================


class DocumentGenerationPipeline:
    """
    Orchestrator for clinical document generation.

    What it does:
        Resolves specialty guidance, builds prompts, and obtains text from
        the single configured TextCompletionProvider.

    How it works:
        STAGE 1: Initialize with one provider client (and optional limiter)
        STAGE 2: On generate()/regenerate():
            2.1 Validate input
            2.2 Build prompts
            2.3 Call the provider with the (kind, mode) token ceiling
        STAGE 3: On run(): admission and template substitution first

    Example:
        >>> pipeline = DocumentGenerationPipeline(client=my_client)
        >>> pipeline.generate(DocumentKind.CASE_SHEET, transcript, patient)
    """

    def __init__(
        self,
        client: TextCompletionProvider,
        rate_limiter: Optional[RateLimiter] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        default_timeout: Optional[float] = None,
    ):
        """
        Initialize pipeline.

        Args:
            client: The active provider client
            rate_limiter: Guards run() when a user_id is supplied
            prompt_builder: Optional override (for testing)
            default_timeout: Deadline for a whole model chain when the call
                does not pass its own
        """
        self._client = client
        self._rate_limiter = rate_limiter
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._default_timeout = default_timeout

        self._documents_generated = 0
        self._documents_failed = 0

        logger.info(
            f"DocumentGenerationPipeline initialized | "
            f"Provider: {client.provider_name} | "
            f"Models: {len(client.model_names)} | "
            f"Rate limited: {rate_limiter is not None}"
        )

    # =========================================================================
    # STAGE 2: GENERATION API
    # =========================================================================

    def generate(
        self,
        kind: Union[DocumentKind, str],
        transcript: str,
        patient_info: PatientInfo,
        specialty: Optional[str] = None,
        *,
        include_code_suggestions: bool = False,
        custom_template_instruction: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Generate a document from a consultation transcript.

        Args:
            kind: Discharge summary or case sheet
            transcript: Consultation transcript text
            patient_info: Patient demographics
            specialty: Built-in specialty key (ignored when a custom
                template instruction is given)
            include_code_suggestions: Append a coding-suggestions section
            custom_template_instruction: Already-substituted template text
            timeout: Seconds allowed for the whole provider chain

        Returns:
            Generated document text

        Raises:
            ValidationError: Empty transcript or patient name
            ProviderFatalError: Non-retryable provider failure
            GenerationExhaustedError: Every candidate model was unavailable
        """
        kind = self._coerce_kind(kind)
        request = GenerationRequest(
            transcript_or_content=transcript,
            patient_info=patient_info,
            document_kind=kind,
            specialty_key=specialty,
            include_code_suggestions=include_code_suggestions,
            mode=GenerationMode.GENERATE,
        )
        return self._complete(request, custom_template_instruction, timeout)

    def regenerate(
        self,
        kind: Union[DocumentKind, str],
        patient_info: PatientInfo,
        existing_content: str,
        specialty: Optional[str] = None,
        *,
        include_code_suggestions: bool = False,
        custom_template_instruction: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Revise an existing document in place, keeping its section structure.

        Args:
            kind: Discharge summary or case sheet
            patient_info: Patient demographics
            existing_content: Current document text, embedded verbatim
            specialty: Built-in specialty key
            include_code_suggestions: Append a coding-suggestions section
            custom_template_instruction: Already-substituted template text
            timeout: Seconds allowed for the whole provider chain

        Returns:
            Revised document text
        """
        kind = self._coerce_kind(kind)
        request = GenerationRequest(
            transcript_or_content=existing_content,
            patient_info=patient_info,
            document_kind=kind,
            specialty_key=specialty,
            include_code_suggestions=include_code_suggestions,
            mode=GenerationMode.REGENERATE,
        )
        return self._complete(request, custom_template_instruction, timeout)

    def generate_discharge_summary(
        self, transcript: str, patient_info: PatientInfo, specialty: Optional[str] = None, **options
    ) -> str:
        return self.generate(DocumentKind.DISCHARGE_SUMMARY, transcript, patient_info, specialty, **options)

    def generate_case_sheet(
        self, transcript: str, patient_info: PatientInfo, specialty: Optional[str] = None, **options
    ) -> str:
        return self.generate(DocumentKind.CASE_SHEET, transcript, patient_info, specialty, **options)

    def regenerate_discharge_summary(
        self, patient_info: PatientInfo, existing_content: str, specialty: Optional[str] = None, **options
    ) -> str:
        return self.regenerate(
            DocumentKind.DISCHARGE_SUMMARY, patient_info, existing_content, specialty, **options
        )

    def regenerate_case_sheet(
        self, patient_info: PatientInfo, existing_content: str, specialty: Optional[str] = None, **options
    ) -> str:
        return self.regenerate(DocumentKind.CASE_SHEET, patient_info, existing_content, specialty, **options)

    # =========================================================================
    # STAGE 3: FULL REQUEST PATH
    # =========================================================================

    def run(
        self,
        request: GenerationRequest,
        *,
        user_id: Optional[str] = None,
        template_context: Optional[TemplateContext] = None,
        timeout: Optional[float] = None,
    ) -> GenerationResult:
        """
        Handle one request end to end.

        STAGE 3.1: Rate limit admission (when a limiter and user_id exist)
        STAGE 3.2: Validate input
        STAGE 3.3: Substitute custom template variables
        STAGE 3.4: Generate or regenerate

        Args:
            request: The generation request
            user_id: Caller identity for rate limiting
            template_context: Placeholder values for a custom template.
                Defaults to the request's patient and today's date.
            timeout: Seconds allowed for the whole provider chain

        Returns:
            GenerationResult with the text and call metadata

        Raises:
            RateLimitedError: Quota for this window is used up
            ValidationError: Malformed input
            GenerationError: Provider failure
        """
        # STAGE 3.1: Admission
        remaining = None
        if self._rate_limiter is not None and user_id is not None:
            remaining = self._rate_limiter.check_or_raise(user_id).remaining

        # STAGE 3.2: Validation
        request.validate()

        # STAGE 3.3: Custom template
        instruction = None
        if request.custom_template_body:
            context = template_context or TemplateContext.from_patient(
                request.patient_info, consultation_date=date.today()
            )
            instruction = substitute_template_variables(request.custom_template_body, context)

        # STAGE 3.4: Generate
        content = self._complete(request, instruction, timeout)

        return GenerationResult(
            content=content,
            document_kind=request.document_kind,
            mode=request.mode,
            provider=self._client.provider_name,
            prompt_version=PROMPT_VERSION,
            remaining_quota=remaining,
        )

    # =========================================================================
    # STAGE 4: PRIVATE HELPERS
    # =========================================================================

    def _complete(
        self,
        request: GenerationRequest,
        specialty_instruction: Optional[str],
        timeout: Optional[float],
    ) -> str:
        """Validate, build prompts and call the provider once (with its fallback)."""
        request.validate()

        kind, mode = request.document_kind, request.mode
        try:
            max_tokens = MAX_OUTPUT_TOKENS[(kind, mode)]
        except KeyError:
            raise PromptError(
                f"No token ceiling for {kind} / {mode}",
                context={"document_kind": str(kind), "mode": str(mode)},
            )

        prompts = self._prompt_builder.build_prompt(kind, request, specialty_instruction)

        logger.info(
            f"Generating {kind.value} | Mode: {mode.value} | "
            f"Provider: {self._client.provider_name} | "
            f"Input: {len(request.transcript_or_content)} chars | "
            f"Custom template: {specialty_instruction is not None} | "
            f"Max tokens: {max_tokens}"
        )

        try:
            text = self._client.complete(
                prompts.system_prompt,
                prompts.user_prompt,
                max_tokens,
                response_label=prompts.response_label,
                timeout=timeout if timeout is not None else self._default_timeout,
            )
        except Exception:
            self._documents_failed += 1
            raise

        self._documents_generated += 1
        logger.info(f"Generated {kind.value} | Length: {len(text)} chars")
        return text

    @staticmethod
    def _coerce_kind(kind: Union[DocumentKind, str]) -> DocumentKind:
        if isinstance(kind, DocumentKind):
            return kind
        try:
            return DocumentKind.from_string(kind)
        except (ValueError, AttributeError) as e:
            raise ValidationError(str(e), context={"document_kind": kind})

    # =========================================================================
    # STAGE 5: FACTORY METHODS AND HEALTH
    # =========================================================================

    @classmethod
    def from_environment(
        cls, env_file: Optional[str] = None, rate_limited: bool = True
    ) -> "DocumentGenerationPipeline":
        """
        Create pipeline from environment configuration.

        Args:
            env_file: Path to .env file (optional)
            rate_limited: Create and start a RateLimiter for run()

        Raises:
            ConfigurationError: If no provider is configured
        """
        config = PipelineConfiguration.from_environment(env_file=env_file, validate_on_load=True)
        return cls.from_config(config, rate_limited=rate_limited)

    @classmethod
    def from_config(
        cls, config: PipelineConfiguration, rate_limited: bool = True
    ) -> "DocumentGenerationPipeline":
        client = create_llm_client(config)

        limiter = None
        if rate_limited:
            limiter = RateLimiter()
            limiter.start_sweeper(config.rate_limit_sweep_interval)

        return cls(client=client, rate_limiter=limiter, default_timeout=config.generation_timeout)

    @staticmethod
    def check_provider_status(config: PipelineConfiguration) -> ProviderStatus:
        """Health check that reports missing credentials instead of raising."""
        try:
            config.validate()
        except ConfigurationError:
            return ProviderStatus(provider=None, status="not_configured")
        return ProviderStatus(
            provider=config.active_provider.value,
            status="configured",
            models=tuple(config.active_models),
        )

    def provider_status(self) -> ProviderStatus:
        return ProviderStatus(
            provider=self._client.provider_name,
            status="configured",
            models=tuple(self._client.model_names),
        )

    def close(self) -> None:
        """Stop the rate limiter sweeper, if any."""
        if self._rate_limiter is not None:
            self._rate_limiter.close()

    def __enter__(self) -> "DocumentGenerationPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # STAGE 6: PROPERTIES AND METRICS
    # =========================================================================

    @property
    def client(self) -> TextCompletionProvider:
        return self._client

    @property
    def rate_limiter(self) -> Optional[RateLimiter]:
        return self._rate_limiter

    @property
    def documents_generated(self) -> int:
        return self._documents_generated

    @property
    def documents_failed(self) -> int:
        return self._documents_failed


# =============================================================================
# STAGE 7: SMOKE TEST
# =============================================================================

if __name__ == "__main__":
    import sys

    from clinical_documentation.logging_setup import configure_logging

    print("\n--- Clinical Documentation Pipeline Smoke Test ---\n")

    try:
        config = PipelineConfiguration.from_environment(validate_on_load=False)
        configure_logging(config.log_level, config.log_file)

        status = DocumentGenerationPipeline.check_provider_status(config)
        print(f"1. Provider status: {status.to_dict()}")
        if not status.is_configured:
            print("\n[FAIL] Set GROQ_API_KEY or GEMINI_API_KEY")
            sys.exit(1)

        with DocumentGenerationPipeline.from_config(config) as pipeline:
            text = pipeline.generate_discharge_summary(
                "Patient presented with two days of productive cough and low-grade fever. "
                "Chest clear after nebulisation. Discharged on oral amoxicillin for five days.",
                PatientInfo(name="Test Patient", age=40, gender="male"),
                specialty="general",
            )
            print(f"\n2. Generated {len(text)} characters")

        print("\n[OK] SMOKE TEST PASSED")

    except Exception as e:
        print(f"\n[FAIL] SMOKE TEST FAILED: {e}")
        sys.exit(1)
