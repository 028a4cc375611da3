"""
Configuration for Clinical Documentation Generation

This module defines the configuration dataclass used to initialize the
document generation pipeline. Configuration is:
    1. Loaded from environment variables (with .env support)
    2. Validated at startup to fail fast on misconfiguration
    3. Resolved to exactly ONE active provider

Provider Selection:
    LLM_PROVIDER set      → that provider (its key must be present)
    GROQ_API_KEY set      → Groq (primary, free tier)
    GEMINI_API_KEY set    → Gemini (secondary)
    neither               → ConfigurationError

    The two providers never form a combined fallback chain. Exhausting
    the active provider's model list is terminal for that call.

Usage:
    from clinical_documentation.core.config import PipelineConfiguration

    config = PipelineConfiguration.from_environment()

    # Or configure programmatically
    config = PipelineConfiguration(groq_api_key="gsk_...")

Author: Shubham Singh
Date: December 2025
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv
from loguru import logger

from clinical_documentation.core.constants import (
    DEFAULT_GEMINI_MODELS,
    DEFAULT_GROQ_MODELS,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
)
from clinical_documentation.core.enums import LLMProvider
from clinical_documentation.core.exceptions import ConfigurationError


# =============================================================================
# STAGE 1: DEFAULT VALUES
# =============================================================================


class ConfigDefaults:
    """Default configuration values."""

    DEFAULT_GROQ_MODELS = DEFAULT_GROQ_MODELS
    DEFAULT_GEMINI_MODELS = DEFAULT_GEMINI_MODELS
    DEFAULT_SWEEP_INTERVAL = DEFAULT_SWEEP_INTERVAL_SECONDS
    DEFAULT_LOG_LEVEL = "INFO"


def _parse_model_list(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Parse a comma-separated model list, keeping order and dropping blanks."""
    if not raw:
        return default
    models = tuple(m.strip() for m in raw.split(",") if m.strip())
    return models or default


def _parse_optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number, got '{raw}'", context={"setting": name}
        )


# =============================================================================
# STAGE 2: CONFIGURATION DATACLASS
# =============================================================================


@dataclass
class PipelineConfiguration:
    """
    Configuration for the document generation pipeline.

    What it does:
        Holds credentials, the ordered model list of each provider, and
        the ambient settings (timeout, sweep interval, logging).

    Example:
        >>> config = PipelineConfiguration(gemini_api_key="...")
        >>> config.active_provider
        <LLMProvider.GEMINI: 'gemini'>
    """

    # -------------------------------------------------------------------------
    # 2.1 Provider Configuration
    # -------------------------------------------------------------------------
    groq_api_key: Optional[str] = None
    """Groq API key. Makes Groq the active provider unless overridden."""

    gemini_api_key: Optional[str] = None
    """Google Gemini API key."""

    llm_provider: Optional[LLMProvider] = None
    """Explicit provider choice. None means: Groq if keyed, else Gemini."""

    groq_models: Tuple[str, ...] = ConfigDefaults.DEFAULT_GROQ_MODELS
    """Ordered Groq candidate models."""

    gemini_models: Tuple[str, ...] = ConfigDefaults.DEFAULT_GEMINI_MODELS
    """Ordered Gemini candidate models."""

    # -------------------------------------------------------------------------
    # 2.2 Runtime Configuration
    # -------------------------------------------------------------------------
    generation_timeout: Optional[float] = None
    """Deadline in seconds for a whole model chain. None disables it."""

    rate_limit_sweep_interval: float = ConfigDefaults.DEFAULT_SWEEP_INTERVAL
    """Seconds between sweeps of expired rate limit entries."""

    log_level: str = ConfigDefaults.DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None

    # -------------------------------------------------------------------------
    # 2.3 Derived Properties
    # -------------------------------------------------------------------------

    @property
    def active_provider(self) -> Optional[LLMProvider]:
        """The single provider this configuration designates, if any."""
        if self.llm_provider is not None:
            return self.llm_provider
        if self.groq_api_key:
            return LLMProvider.GROQ
        if self.gemini_api_key:
            return LLMProvider.GEMINI
        return None

    @property
    def active_models(self) -> Tuple[str, ...]:
        if self.active_provider == LLMProvider.GROQ:
            return self.groq_models
        if self.active_provider == LLMProvider.GEMINI:
            return self.gemini_models
        return ()

    # -------------------------------------------------------------------------
    # 2.4 Validation Methods
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Checks:
            1. A provider is designated and its API key is configured
            2. The active model list is not empty
            3. Numeric parameters are in valid ranges

        Raises:
            ConfigurationError: If configuration is invalid
        """
        provider = self.active_provider
        if provider is None:
            raise ConfigurationError(
                "Set either GROQ_API_KEY (recommended, free tier) or GEMINI_API_KEY",
                context={"settings": ["GROQ_API_KEY", "GEMINI_API_KEY"]},
            )

        if provider == LLMProvider.GROQ and not self.groq_api_key:
            raise ConfigurationError(
                "Groq API key required when using Groq provider",
                context={"setting": "GROQ_API_KEY", "provider": provider.value},
            )

        if provider == LLMProvider.GEMINI and not self.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key required when using Gemini provider",
                context={"setting": "GEMINI_API_KEY", "provider": provider.value},
            )

        if not self.active_models:
            raise ConfigurationError(
                "Model list for the active provider is empty",
                context={"provider": provider.value},
            )

        if self.generation_timeout is not None and self.generation_timeout <= 0:
            raise ConfigurationError(
                f"Generation timeout must be positive, got {self.generation_timeout}",
                context={"setting": "GENERATION_TIMEOUT"},
            )

        if self.rate_limit_sweep_interval <= 0:
            raise ConfigurationError(
                f"Sweep interval must be positive, got {self.rate_limit_sweep_interval}",
                context={"setting": "RATE_LIMIT_SWEEP_INTERVAL"},
            )

    # -------------------------------------------------------------------------
    # 2.5 Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_environment(
        cls, env_file: Optional[str] = None, validate_on_load: bool = True
    ) -> "PipelineConfiguration":
        """
        Load configuration from environment variables.

        STAGE 1: Load .env file (if specified or found)
        STAGE 2: Read environment variables
        STAGE 3: Convert to typed configuration
        STAGE 4: Validate configuration (optional)

        Args:
            env_file: Path to .env file (optional, auto-detected if not provided)
            validate_on_load: Whether to validate after loading

        Returns:
            Configured PipelineConfiguration instance

        Raises:
            ConfigurationError: If required settings are missing or invalid
        """
        # STAGE 1: Load .env file
        if env_file:
            load_dotenv(env_file)
        else:
            possible_locations = [
                Path.cwd() / ".env",
                Path.cwd() / "clinical_documentation" / ".env",
            ]
            for location in possible_locations:
                if location.exists():
                    logger.debug(f"Loading environment from {location}")
                    load_dotenv(location)
                    break

        # STAGE 2: Read environment variables
        groq_key = os.getenv("GROQ_API_KEY") or None
        gemini_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None

        provider_raw = os.getenv("LLM_PROVIDER")
        llm_provider = None
        if provider_raw and provider_raw.strip():
            try:
                llm_provider = LLMProvider.from_string(provider_raw)
            except ValueError as e:
                raise ConfigurationError(str(e), context={"setting": "LLM_PROVIDER"})

        sweep_interval = _parse_optional_float("RATE_LIMIT_SWEEP_INTERVAL")

        # STAGE 3: Create configuration
        config = cls(
            groq_api_key=groq_key,
            gemini_api_key=gemini_key,
            llm_provider=llm_provider,
            groq_models=_parse_model_list(os.getenv("GROQ_MODELS"), DEFAULT_GROQ_MODELS),
            gemini_models=_parse_model_list(os.getenv("GEMINI_MODELS"), DEFAULT_GEMINI_MODELS),
            generation_timeout=_parse_optional_float("GENERATION_TIMEOUT"),
            rate_limit_sweep_interval=(
                sweep_interval if sweep_interval is not None else ConfigDefaults.DEFAULT_SWEEP_INTERVAL
            ),
            log_level=os.getenv("LOG_LEVEL", ConfigDefaults.DEFAULT_LOG_LEVEL).upper(),
            log_file=os.getenv("LOG_FILE") or None,
        )

        # STAGE 4: Validate
        if validate_on_load:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary (for logging/debugging)."""
        provider = self.active_provider
        return {
            "llm_provider": provider.value if provider else None,
            "groq_api_key": "***" if self.groq_api_key else None,
            "gemini_api_key": "***" if self.gemini_api_key else None,
            "groq_models": list(self.groq_models),
            "gemini_models": list(self.gemini_models),
            "generation_timeout": self.generation_timeout,
            "rate_limit_sweep_interval": self.rate_limit_sweep_interval,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }
