"""
Routers package for FastAPI endpoints.

- analysis: Health check and document analysis endpoints
"""

from . import analysis

__all__ = ["analysis"]
