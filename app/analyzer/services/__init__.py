"""
Services package for the analysis application.

Contains:
- ai: Groq integration for prompt building, completion and normalization
- rate_limit: Per-client sliding-window throttling
- stats: Process-lifetime request counter
"""

from .ai import AIService
from .rate_limit import SlidingWindowRateLimiter
from .stats import RequestCounter

__all__ = ["AIService", "RequestCounter", "SlidingWindowRateLimiter"]
