from __future__ import annotations


# PUBLIC_INTERFACE
class StoreUnavailableError(Exception):
    """
    Raised by a storage backend when an operation could not be carried out
    (connection refused, SQL error, undecodable stored value, ...).

    The HTTP layer answers 503 for it. The original backend exception is kept
    as __cause__.
    """

    def __init__(self, backend: str, operation: str, message: str = "") -> None:
        self.backend = backend
        self.operation = operation
        text = f"{backend} store failed during {operation}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)
