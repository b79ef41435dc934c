"""
Routers package for FastAPI endpoints.

Organized by domain:
- documents: Upload, analysis and form generation endpoints
"""

from . import documents

__all__ = ["documents"]
