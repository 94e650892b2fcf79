"""
Exceptions raised by storage backends.
"""


class StoreError(Exception):
    """Base class for storage failures."""

    pass


class NotFoundError(StoreError):
    """Raised when no record exists for the requested identifier."""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class SerializationError(StoreError):
    """Raised when a stored classification or extraction cannot be decoded."""

    pass


class BackendUnavailableError(StoreError):
    """Raised when a backend cannot be opened or initialized."""

    pass


class StoreNotInitializedError(RuntimeError):
    """Raised when the store is requested before one was installed."""

    pass
