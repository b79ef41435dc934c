"""
PDF processing service.

Reads the text layer of a PDF with pdfplumber and, for scanned documents
without one, renders pages to PIL Images with pdf2image (poppler) so they
can be transcribed by the vision model.
"""

import io
import logging
from typing import BinaryIO

from PIL import Image

from ..exceptions import UpstreamError

logger = logging.getLogger(__name__)


class PDFConversionError(UpstreamError):
    """Raised when PDF text extraction or page rendering fails."""

    pass


def _read_bytes(file_bytes: bytes | BinaryIO) -> bytes:
    if hasattr(file_bytes, "read"):
        return file_bytes.read()
    return file_bytes


def _check_pdf_header(pdf_bytes: bytes) -> None:
    if not pdf_bytes:
        raise PDFConversionError("Empty PDF file provided")
    if not pdf_bytes[:4] == b"%PDF":
        raise PDFConversionError("Invalid PDF file: does not start with PDF header")


class PDFService:
    """
    Service for PDF processing operations.

    Uses pdfplumber for text extraction and pdf2image (backed by poppler)
    to convert PDF pages to images.
    """

    def __init__(self, dpi: int = 200, image_format: str = "PNG"):
        """
        Initialize the PDF service.

        Args:
            dpi: Resolution for PDF to image conversion. Higher = better quality but slower.
            image_format: Output image format (PNG recommended for quality).
        """
        self.dpi = dpi
        self.image_format = image_format

    def extract_text(self, file_bytes: bytes | BinaryIO) -> str:
        """
        Extract the text layer of every page, joined by newlines.

        Args:
            file_bytes: PDF file as bytes or file-like object.

        Returns:
            The extracted text, stripped. Empty for scanned PDFs.

        Raises:
            PDFConversionError: If the file is not a readable PDF.
        """
        import pdfplumber

        pdf_bytes = _read_bytes(file_bytes)
        _check_pdf_header(pdf_bytes)

        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            logger.error("pdfplumber extraction failed: %s", e)
            raise PDFConversionError(f"Could not read PDF text: {e}") from e

        text = "\n".join(pages).strip()
        logger.info("Extracted %d characters from %d page(s)", len(text), len(pages))
        return text

    def convert_pdf_to_images(
        self,
        file_bytes: bytes | BinaryIO,
        first_page: int | None = None,
        last_page: int | None = None,
    ) -> list[Image.Image]:
        """
        Convert PDF pages to PIL Images.

        Args:
            file_bytes: PDF file as bytes or file-like object.
            first_page: First page to convert (1-indexed, inclusive). None for first page.
            last_page: Last page to convert (1-indexed, inclusive). None for last page.

        Returns:
            List of PIL Image objects, one per page.

        Raises:
            PDFConversionError: If conversion fails for any reason.
        """
        from pdf2image import convert_from_bytes
        from pdf2image.exceptions import (
            PDFInfoNotInstalledError,
            PDFPageCountError,
            PDFSyntaxError,
        )

        pdf_bytes = _read_bytes(file_bytes)
        _check_pdf_header(pdf_bytes)

        try:
            logger.info(
                "Converting PDF to images (dpi=%d, pages=%s-%s)",
                self.dpi,
                first_page or "first",
                last_page or "last",
            )

            images = convert_from_bytes(
                pdf_bytes,
                dpi=self.dpi,
                fmt=self.image_format.lower(),
                first_page=first_page,
                last_page=last_page,
                thread_count=2,
            )

            logger.info("Successfully converted %d page(s)", len(images))
            return images

        except PDFInfoNotInstalledError as e:
            logger.error("Poppler not installed: %s", e)
            raise PDFConversionError(
                "Poppler not installed. Install poppler-utils: "
                "brew install poppler (macOS) or apt-get install poppler-utils (Linux)"
            ) from e

        except PDFPageCountError as e:
            logger.error("Could not get PDF page count: %s", e)
            raise PDFConversionError(f"Could not determine PDF page count: {e}") from e

        except PDFSyntaxError as e:
            logger.error("PDF syntax error: %s", e)
            raise PDFConversionError(f"Invalid or corrupted PDF file: {e}") from e

        except Exception as e:
            logger.exception("Unexpected error during PDF conversion")
            raise PDFConversionError(f"PDF conversion failed: {e}") from e

    def render_leading_pages(
        self, file_bytes: bytes | BinaryIO, max_pages: int
    ) -> list[Image.Image]:
        """
        Render at most ``max_pages`` pages from the start of the document.

        Raises:
            PDFConversionError: If conversion fails.
        """
        images = self.convert_pdf_to_images(file_bytes, first_page=1, last_page=max_pages)
        if not images:
            raise PDFConversionError("No pages found in PDF")
        return images

    def image_to_bytes(
        self, image: Image.Image, format: str = "PNG", quality: int = 95
    ) -> bytes:
        """
        Convert a PIL Image to bytes.

        Args:
            image: PIL Image to convert.
            format: Output format (PNG, JPEG, etc.).
            quality: Quality for lossy formats (1-100).

        Returns:
            Image as bytes.
        """
        buffer = io.BytesIO()
        save_kwargs = {"format": format}
        if format.upper() in ("JPEG", "JPG", "WEBP"):
            save_kwargs["quality"] = quality
        image.save(buffer, **save_kwargs)
        buffer.seek(0)
        return buffer.getvalue()


# Singleton instance for convenience
_pdf_service: PDFService | None = None


def get_pdf_service() -> PDFService:
    """Get or create the PDF service singleton."""
    global _pdf_service
    if _pdf_service is None:
        _pdf_service = PDFService()
    return _pdf_service
