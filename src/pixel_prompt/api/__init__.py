"""
FastAPI application and API components.

Main exports:
    create_app: Application factory function
    ErrorResponse: Standardized error response schema
    HealthCheckResponse: Health check response schema
"""

from .app import create_app
from .schemas import ErrorResponse, HealthCheckResponse

__all__ = ["create_app", "ErrorResponse", "HealthCheckResponse"]
