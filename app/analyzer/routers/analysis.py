"""
Router for the analysis API.

Handles:
- Health check with the lifetime request count
- Rate-limited document analysis
"""

import json
import logging
import time

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..models import (
    AnalysisRequest,
    AnalysisResult,
    ErrorResponse,
    HealthResponse,
    RateLimitedResponse,
)
from ..services.ai import AIService, AIServiceError, get_ai_service
from ..services.rate_limit import SlidingWindowRateLimiter, get_rate_limiter
from ..services.stats import RequestCounter, get_request_counter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])

TEXT_TOO_SHORT_MESSAGE = "Texte trop court (min {min_length} caractères)"
INVALID_BODY_MESSAGE = "Corps de requête JSON invalide"
PAYLOAD_TOO_LARGE_MESSAGE = "Requête trop volumineuse"
GENERIC_ERROR_MESSAGE = "Erreur serveur"


class InvalidAnalysisRequestError(Exception):
    """Raised when the analyze body is unusable (bad JSON, missing or short text)."""

    pass


class PayloadTooLargeError(Exception):
    """Raised when the request body exceeds the configured size limit."""

    pass


# =============================================================================
# Dependencies
# =============================================================================


def client_key(request: Request) -> str:
    """Identify the caller by IP address."""
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(
    request: Request,
    limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """Reject the request with 429 when the caller's window is full."""
    limiter.check(client_key(request))


async def read_analysis_text(request: Request, settings: Settings) -> str:
    """
    Read and validate the ``text`` field of the request body.

    Raises:
        PayloadTooLargeError: If the body exceeds ``max_body_bytes``.
        InvalidAnalysisRequestError: If the body is not JSON, or ``text`` is
            missing or shorter than ``min_text_length``.
    """
    declared_length = request.headers.get("content-length")
    if declared_length and declared_length.isdigit():
        if int(declared_length) > settings.max_body_bytes:
            raise PayloadTooLargeError(PAYLOAD_TOO_LARGE_MESSAGE)

    body = await request.body()
    if len(body) > settings.max_body_bytes:
        raise PayloadTooLargeError(PAYLOAD_TOO_LARGE_MESSAGE)

    too_short = TEXT_TOO_SHORT_MESSAGE.format(min_length=settings.min_text_length)

    try:
        payload = json.loads(body) if body else {}
    except ValueError as e:
        raise InvalidAnalysisRequestError(INVALID_BODY_MESSAGE) from e

    try:
        analysis_request = AnalysisRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidAnalysisRequestError(too_short) from e

    text = analysis_request.text
    if not text or len(text) < settings.min_text_length:
        raise InvalidAnalysisRequestError(too_short)
    return text


# =============================================================================
# Routes
# =============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    counter: RequestCounter = Depends(get_request_counter),
) -> HealthResponse:
    """Health check endpoint (not rate limited)."""
    return HealthResponse(
        status="ok",
        model=settings.model_display_name,
        requests=counter.value,
    )


@router.post(
    "/analyze",
    response_model=AnalysisResult,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        429: {"model": RateLimitedResponse},
        500: {"model": ErrorResponse},
    },
)
async def analyze_document(
    request: Request,
    settings: Settings = Depends(get_settings),
    counter: RequestCounter = Depends(get_request_counter),
    ai_service: AIService = Depends(get_ai_service),
) -> AnalysisResult:
    """
    Analyze a scientific document.

    Accepts ``{"text": "..."}`` and returns its bibliographic metadata,
    themes and structured summary. Every call is counted, including the
    ones rejected for a too-short text.
    """
    started = time.perf_counter()
    request_number = counter.increment()
    logger.info("Analysis request #%d from %s", request_number, client_key(request))

    try:
        text = await read_analysis_text(request, settings)
        result = await ai_service.analyze_text(text)
    except (InvalidAnalysisRequestError, PayloadTooLargeError) as e:
        logger.warning("Request #%d rejected: %s", request_number, e)
        raise
    except AIServiceError as e:
        logger.error("Request #%d failed: %s", request_number, e)
        raise
    except Exception as e:
        logger.exception("Request #%d failed unexpectedly", request_number)
        raise AIServiceError(str(e) or GENERIC_ERROR_MESSAGE) from e

    duration_ms = (time.perf_counter() - started) * 1000
    logger.info("Request #%d succeeded in %.0fms", request_number, duration_ms)
    return result
