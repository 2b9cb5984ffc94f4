"""
FastAPI application for scientific literature analysis.

Provides endpoints for:
- Health check with the lifetime request count
- Extracting bibliographic metadata and a structured summary from
  document text through a Groq-hosted model
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ensure_api_key, get_settings
from .routers import analysis
from .routers.analysis import (
    GENERIC_ERROR_MESSAGE,
    InvalidAnalysisRequestError,
    PayloadTooLargeError,
)
from .services.ai import AIServiceError, UpstreamQuotaError
from .services.rate_limit import RateLimitExceededError

# Configure logging
logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    ensure_api_key(settings)
    logger.info("Starting Scientific Analysis Service (%s)", settings.model_display_name)
    logger.info("Port: %d", settings.port)
    logger.info("Health: GET /api/health")
    logger.info("Analyze: POST /api/analyze")
    yield
    logger.info("Shutting down Scientific Analysis Service...")


# Create FastAPI application
app = FastAPI(
    title="Scientific Analysis API",
    description="Bibliographic metadata extraction from scientific documents using Groq",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every incoming request."""
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(analysis.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(InvalidAnalysisRequestError)
async def invalid_request_handler(request: Request, exc: InvalidAnalysisRequestError):
    """Handle unusable analyze bodies."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": str(exc)},
    )


@app.exception_handler(PayloadTooLargeError)
async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
    """Handle bodies over the size limit."""
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content={"error": str(exc)},
    )


@app.exception_handler(RateLimitExceededError)
async def rate_limit_handler(request: Request, exc: RateLimitExceededError):
    """Handle clients over their local request allowance."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": str(exc), "retryAfter": exc.retry_after},
    )


@app.exception_handler(UpstreamQuotaError)
async def upstream_quota_handler(request: Request, exc: UpstreamQuotaError):
    """Handle quota exhaustion reported by the upstream provider."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": str(exc), "retryAfter": exc.retry_after},
    )


@app.exception_handler(AIServiceError)
async def ai_service_error_handler(request: Request, exc: AIServiceError):
    """Handle AI service errors."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or GENERIC_ERROR_MESSAGE},
    )


def run() -> None:
    """Validate configuration and serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    ensure_api_key(settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
