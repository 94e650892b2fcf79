"""
PDF Viewer Backend Application.

A FastAPI service that stores uploaded PDF documents, classifies them and
extracts structured data using AI, and keeps a prompt/cost audit trail.
"""

__version__ = "1.0.0"
