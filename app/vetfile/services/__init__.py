"""
Services package for the claims application.

Contains:
- pdf_service: PDF text extraction and page rendering
- text_extractor: Per-document text extraction for uploads
- ai: OpenAI integration for claims analysis and transcription
- form_builder: VA form projection of an analysis
- lifecycle: Upload/analysis lifecycle tracker
"""

from .ai import AIService
from .lifecycle import LifecycleTracker
from .pdf_service import PDFService
from .text_extractor import TextExtractor

__all__ = ["AIService", "LifecycleTracker", "PDFService", "TextExtractor"]
