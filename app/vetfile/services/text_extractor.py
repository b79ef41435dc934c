"""
Text extraction for uploaded documents.

PDFs are read with pdfplumber; scanned PDFs and images are transcribed
with the vision model when a live AI service is available, otherwise an
explanatory placeholder is returned. A failure in one document is written
into that document's text instead of aborting the batch.
"""

import asyncio
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..models import FileRecord
from .ai import AIService, AIServiceError
from .pdf_service import PDFConversionError, PDFService

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
IMAGE_MEDIA_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})
SUPPORTED_MEDIA_TYPES = IMAGE_MEDIA_TYPES | {PDF_MEDIA_TYPE}

NO_PDF_TEXT = "No text content found in PDF"


class UnsupportedMediaTypeError(Exception):
    """Raised when a file's media type cannot be extracted."""

    pass


def document_header(original_name: str, document_type: str) -> str:
    return f"--- DOCUMENT: {original_name} ({document_type}) ---"


class TextExtractor:
    """
    Extracts text from stored upload files.

    Args:
        pdf_service: PDF text/rendering service.
        ai_service: Used for vision transcription. None disables it.
        vision_max_pages: Pages of a scanned PDF sent for transcription.
    """

    def __init__(
        self,
        pdf_service: PDFService,
        ai_service: AIService | None = None,
        vision_max_pages: int = 5,
    ):
        self.pdf_service = pdf_service
        self.ai_service = ai_service
        self.vision_max_pages = vision_max_pages

    @property
    def vision_enabled(self) -> bool:
        return self.ai_service is not None and not self.ai_service.use_mock

    async def extract_text(self, path: Path, media_type: str) -> str:
        """
        Extract text from one file, never raising for document problems.

        Returns:
            Extracted text, a placeholder for unreadable images, or an
            ``Error extracting text: ...`` line describing the failure.
        """
        try:
            if media_type == PDF_MEDIA_TYPE:
                return await self._extract_pdf(path)
            if media_type in IMAGE_MEDIA_TYPES:
                return await self._extract_image(path, media_type)
            raise UnsupportedMediaTypeError(f"Unsupported file type: {media_type}")
        except (
            UnsupportedMediaTypeError,
            PDFConversionError,
            AIServiceError,
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
        ) as e:
            logger.warning("Text extraction failed for %s: %s", path.name, e)
            return f"Error extracting text: {e}"

    async def extract_documents(self, files: list[FileRecord]) -> str:
        """
        Extract every file concurrently and join the results in upload order.

        Each section starts with a ``--- DOCUMENT: name (type) ---`` header.
        """
        texts = await asyncio.gather(
            *(self.extract_text(f.path, f.media_type) for f in files)
        )
        sections = [
            f"{document_header(f.original_name, f.document_type)}\n{text}"
            for f, text in zip(files, texts)
        ]
        combined = "\n\n".join(sections)
        logger.info(
            "Extracted %d characters from %d document(s)", len(combined), len(files)
        )
        return combined

    async def _extract_pdf(self, path: Path) -> str:
        pdf_bytes = await asyncio.to_thread(path.read_bytes)
        text = await asyncio.to_thread(self.pdf_service.extract_text, pdf_bytes)
        if text:
            return text

        if not self.vision_enabled:
            return NO_PDF_TEXT

        logger.info("No text layer in %s, transcribing rendered pages", path.name)
        pages = await asyncio.to_thread(
            self.pdf_service.render_leading_pages, pdf_bytes, self.vision_max_pages
        )
        transcribed = []
        for page in pages:
            png = self.pdf_service.image_to_bytes(page, format="PNG")
            transcribed.append(await self.ai_service.transcribe_image(png, "image/png"))
        return "\n".join(transcribed).strip() or NO_PDF_TEXT

    async def _extract_image(self, path: Path, media_type: str) -> str:
        if self.vision_enabled:
            image_bytes = await asyncio.to_thread(path.read_bytes)
            return await self.ai_service.transcribe_image(image_bytes, media_type)
        return await asyncio.to_thread(self._image_placeholder, path, media_type)

    @staticmethod
    def _image_placeholder(path: Path, media_type: str) -> str:
        with Image.open(path) as image:
            width, height = image.size

        return (
            "[IMAGE FILE - OCR PROCESSING REQUIRED]\n\n"
            f"File: {path.name}\n"
            f"Type: {media_type}\n"
            f"Dimensions: {width}x{height}\n\n"
            "To properly analyze image files, please consider:\n"
            "1. Converting to PDF if this is a document\n"
            "2. Ensuring the text is clearly visible\n"
            "3. Uploading additional text-based documents if available"
        )
