"""
Services package for the document processing backend.

Contains:
- pdf_service: PDF to image rendering
- ai: agent clients for classification and data extraction
"""

from .pdf_service import PDFConversionError, PDFService

__all__ = ["PDFConversionError", "PDFService"]
