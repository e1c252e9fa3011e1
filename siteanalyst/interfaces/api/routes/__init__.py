"""
API Routes.
"""

from . import analysis, health

__all__ = ["health", "analysis"]
