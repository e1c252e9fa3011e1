"""
API Interface - FastAPI REST API.

Upload a PDF, get back the complete location analysis or a list of every
section that could not be extracted.
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
