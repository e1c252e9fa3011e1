"""
CLI Interface - Command-line tools for SiteAnalyst.

Provides commands for:
- Location analysis extraction
- Section listing
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
