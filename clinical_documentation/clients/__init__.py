"""
Clients Layer - Text Completion Provider Abstractions

This layer provides clean abstractions over the text generation providers
(Groq, Gemini), so the pipeline only ever sees a TextCompletionProvider.

Submodules:
    llm_client.py    → Protocol and base implementation (model fallback)
    groq_client.py   → Groq implementation (primary, OpenAI-compatible)
    gemini_client.py → Google Gemini implementation (secondary)
    factory.py       → Builds the single active client from configuration

Author: Shubham Singh
Date: December 2025
"""

from clinical_documentation.clients.llm_client import (
    TextCompletionProvider,
    BaseLLMClient,
)
from clinical_documentation.clients.groq_client import GroqClient
from clinical_documentation.clients.gemini_client import GeminiClient
from clinical_documentation.clients.factory import create_llm_client

__all__ = [
    "TextCompletionProvider",
    "BaseLLMClient",
    "GroqClient",
    "GeminiClient",
    "create_llm_client",
]
