"""
AI service package for bibliographic analysis of document text.

This package provides modular AI functionality split into:
- prompt: Instruction header and text truncation
- client: Single chat-completion call against the Groq endpoint
- normalization: JSON extraction and per-field defaulting

The AIService class wires these together behind one coroutine.
"""

import logging
from typing import Any

from ...config import get_settings
from ...models import AnalysisResult
from .client import request_completion
from .exceptions import AIServiceError, ResponseFormatError, UpstreamQuotaError
from .normalization import analyze_reply, extract_json_object, normalize_analysis
from .prompt import ANALYSIS_PROMPT, build_analysis_prompt, truncate_text

logger = logging.getLogger(__name__)

__all__ = [
    "AIService",
    "AIServiceError",
    "ResponseFormatError",
    "UpstreamQuotaError",
    "ANALYSIS_PROMPT",
    "analyze_reply",
    "build_analysis_prompt",
    "extract_json_object",
    "get_ai_service",
    "normalize_analysis",
    "request_completion",
    "truncate_text",
]


# =============================================================================
# AIService Class
# =============================================================================


class AIService:
    """
    Service for AI-powered analysis of scientific documents.

    Uses a Groq-hosted model through the OpenAI-compatible API to extract
    bibliographic metadata and a structured summary from raw text.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        max_text_length: int | None = None,
        client: Any | None = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: Groq API key. If None, reads from config/environment.
            model: Model to use. If None, reads from config.
            base_url: OpenAI-compatible endpoint of the provider.
            temperature: Sampling temperature.
            max_tokens: Output-token ceiling.
            max_text_length: Characters of document text kept in the prompt.
            client: Pre-built AsyncOpenAI-compatible client (mainly for tests).
        """
        settings = get_settings()

        self.api_key = api_key if api_key is not None else settings.groq_api_key
        self.model = model or settings.groq_model
        self.base_url = base_url or settings.groq_base_url
        self.temperature = (
            temperature if temperature is not None else settings.groq_temperature
        )
        self.max_tokens = max_tokens or settings.groq_max_tokens
        self.max_text_length = max_text_length or settings.max_text_length
        self._client = client

    @property
    def client(self):
        """Lazy-load the AsyncOpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError(
                    "Groq API key not provided. Set GROQ_API_KEY environment variable."
                )
            from openai import AsyncOpenAI

            # Retries are not performed on the caller's behalf
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                max_retries=0,
            )
        return self._client

    def build_prompt(self, text: str) -> str:
        """Build the prompt for ``text`` using the configured truncation limit."""
        return build_analysis_prompt(text, self.max_text_length)

    async def analyze_text(self, text: str) -> AnalysisResult:
        """
        Analyze a document and return its normalized metadata.

        Args:
            text: Raw document text, already validated for minimum length.

        Returns:
            AnalysisResult with every field populated.

        Raises:
            UpstreamQuotaError: If the provider's quota is exhausted.
            ResponseFormatError: If the reply holds no parseable JSON object.
            AIServiceError: On any other provider failure.
        """
        if len(text) > self.max_text_length:
            logger.info(
                "Truncating document from %d to %d characters",
                len(text),
                self.max_text_length,
            )

        reply = await request_completion(
            self.build_prompt(text),
            client=self.client,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return analyze_reply(reply)


# =============================================================================
# Singleton Factory
# =============================================================================

_ai_service: AIService | None = None


def get_ai_service() -> AIService:
    """Get or create the AI service singleton."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
