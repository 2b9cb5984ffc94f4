"""
Pydantic models for the literature analysis API.

Defines the request body, the fixed-shape analysis result and the
health/error payloads returned by the HTTP routes.
"""

from pydantic import BaseModel, ConfigDict, Field


class AnalysisRequest(BaseModel):
    """
    Body of POST /api/analyze.

    Attributes:
        text: Raw document text to analyze. Length is checked by the route
            so that a too-short text produces a 400 instead of a 422.
    """

    model_config = ConfigDict(extra="ignore")

    text: str | None = Field(
        default=None,
        description="Full document text (at least 100 characters)",
    )


class AnalysisSummary(BaseModel):
    """Structured summary of the research described by the document."""

    problem: str = Field(..., description="Research problem")
    method: str = Field(..., description="Methodology")
    data: str = Field(..., description="Data used")
    results: str = Field(..., description="Main results")


class AnalysisResult(BaseModel):
    """
    Normalized bibliographic metadata and analysis of a document.

    Every field is always populated, either with the model's value or with
    its fallback.
    """

    title: str
    authors: list[str]
    abstract: str
    doi: str
    year: str | int
    keywords: list[str]
    theme: str
    themeScore: float | int = Field(..., description="Theme relevance score")
    objectives: list[str]
    summary: AnalysisSummary
    conclusions: list[str]
    gaps: list[str]
    futurework: list[str]
    researchDomain: str


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str = Field(default="ok", description="Service status")
    model: str = Field(..., description="Upstream model identifier")
    requests: int = Field(..., ge=0, description="Analyze calls since process start")


class ErrorResponse(BaseModel):
    """Error payload returned by every failing route."""

    error: str


class RateLimitedResponse(ErrorResponse):
    """Error payload for 429 responses."""

    retryAfter: int = Field(..., description="Seconds to wait before retrying")
