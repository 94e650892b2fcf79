"""
PDF rendering service using pdf2image (poppler).

Converts stored PDF payloads into page images the vision model can read.
"""

import base64
import io
import logging

from PIL import Image

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


class PDFConversionError(Exception):
    """Raised when PDF conversion fails."""

    pass


def is_pdf(data: bytes) -> bool:
    """Check whether a payload starts with the PDF header."""
    return len(data) >= len(PDF_MAGIC) and data[: len(PDF_MAGIC)] == PDF_MAGIC


class PDFService:
    """
    Service for PDF rendering operations.

    Uses pdf2image (backed by poppler) to convert PDF pages to images.
    """

    def __init__(self, dpi: int = 150, image_format: str = "PNG", max_pages: int = 20):
        """
        Initialize the PDF service.

        Args:
            dpi: Resolution for PDF to image conversion. Higher = better quality but slower.
            image_format: Output image format (PNG recommended for quality).
            max_pages: Upper bound on pages rendered from one document.
        """
        self.dpi = dpi
        self.image_format = image_format
        self.max_pages = max_pages

    def convert_pdf_to_images(self, pdf_bytes: bytes) -> list[Image.Image]:
        """
        Render the first ``max_pages`` pages of a PDF to PIL Images.

        Args:
            pdf_bytes: PDF file content.

        Returns:
            List of PIL Image objects, one per page.

        Raises:
            PDFConversionError: If conversion fails for any reason.
        """
        if not pdf_bytes:
            raise PDFConversionError("Empty PDF file provided")

        if not is_pdf(pdf_bytes):
            raise PDFConversionError("Invalid PDF file: does not start with PDF header")

        from pdf2image import convert_from_bytes
        from pdf2image.exceptions import (
            PDFInfoNotInstalledError,
            PDFPageCountError,
            PDFSyntaxError,
        )

        try:
            logger.info(
                "Converting PDF to images (dpi=%d, max_pages=%d)",
                self.dpi,
                self.max_pages,
            )
            images = convert_from_bytes(
                pdf_bytes,
                dpi=self.dpi,
                fmt=self.image_format.lower(),
                first_page=1,
                last_page=self.max_pages,
                thread_count=2,
            )
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

        if not images:
            raise PDFConversionError("No pages found in PDF")

        logger.info("Successfully converted %d page(s)", len(images))
        return images

    def image_to_base64(self, image: Image.Image, max_size: int = 2048) -> str:
        """
        Encode an image as base64 for the API, shrinking it if needed.

        Args:
            image: Page image.
            max_size: Longest side in pixels after resizing.

        Returns:
            Base64 string of the encoded image.
        """
        if max(image.size) > max_size:
            ratio = max_size / max(image.size)
            new_size = (int(image.size[0] * ratio), int(image.size[1] * ratio))
            image = image.resize(new_size, Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        image.save(buffer, format=self.image_format, optimize=True)
        return base64.b64encode(buffer.getvalue()).decode("utf-8")
