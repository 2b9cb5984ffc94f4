"""
Scientific Analysis Backend Application.

A FastAPI service that extracts bibliographic metadata and a structured
summary from scientific documents using a Groq-hosted model.
"""

__version__ = "1.0.0"
