"""
AKA API package.

Provides the FastAPI application for the AKA short link service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
