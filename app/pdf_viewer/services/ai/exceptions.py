"""
Shared exceptions for AI agent modules.
"""


class AIServiceError(Exception):
    """Raised when an AI call fails or its reply cannot be understood."""

    pass
