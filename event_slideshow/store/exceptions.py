"""Custom exceptions for the remote media store client."""


class StoreError(Exception):
    """Base exception for media store failures."""


class StoreRequestError(StoreError):
    """Raised when the store is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AssetNotFound(StoreError):
    """Raised when destroying an asset the store no longer has."""
