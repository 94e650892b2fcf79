"""
Routers package for FastAPI endpoints.

Organized by domain:
- upload: PDF upload
- classify: AI document classification
- extract: AI structured data extraction
- documents: Document listing and retrieval
- prompts: Prompt audit trail
- schemas: Document types and extraction schemas
"""

from . import classify, documents, extract, prompts, schemas, upload

__all__ = ["classify", "documents", "extract", "prompts", "schemas", "upload"]
