"""
Folio API package.

Provides the FastAPI application for the Folio portfolio tracker.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
