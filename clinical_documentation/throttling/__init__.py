"""
Throttling Layer - Per-User Admission Control

Guards the generation pipeline's entry points with a fixed-window,
in-memory, process-local rate limiter.

Submodules:
    rate_limiter.py → RateLimiter (20 requests / user / 60 s)

Dependency Rule:
    This layer depends on: core
    This layer is used by: pipeline (orchestrator)

Author: Shubham Singh
Date: December 2025
"""

from clinical_documentation.throttling.rate_limiter import RateLimiter, rate_limit_key

__all__ = [
    "RateLimiter",
    "rate_limit_key",
]
