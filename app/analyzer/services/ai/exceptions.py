"""
Shared exceptions for AI service modules.
"""

UPSTREAM_RETRY_AFTER_SECONDS = 60


class AIServiceError(Exception):
    """Raised when AI service operations fail."""

    pass


class UpstreamQuotaError(AIServiceError):
    """Raised when the upstream provider reports its quota is exhausted."""

    def __init__(
        self,
        message: str = "Quota GROQ dépassé. Réessayez plus tard.",
        retry_after: int = UPSTREAM_RETRY_AFTER_SECONDS,
    ):
        super().__init__(message)
        self.retry_after = retry_after


class ResponseFormatError(AIServiceError):
    """Raised when the model reply does not contain a usable JSON object."""

    pass
