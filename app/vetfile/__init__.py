"""
VetFile Backend Application.

A FastAPI service that extracts text from military service documents
and uses AI (OpenAI GPT-4o) to identify potential VA disability claims.
"""

__version__ = "1.0.0"
