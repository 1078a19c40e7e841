"""Errors surfaced by the upload, gallery and reclamation services."""


class SlideshowError(Exception):
    """Base exception for slideshow service failures."""


class MissingPayload(SlideshowError):
    """Raised when an upload request carries no image file."""


class UploadFailed(SlideshowError):
    """Raised when the media store rejects or cannot receive an upload."""


class QueryFailed(SlideshowError):
    """Raised when listing assets from the media store fails."""


class ReclaimItemFailed(SlideshowError):
    """Deleting one expired asset failed; recorded, never raised past a pass."""

    def __init__(self, asset_id: str, reason: str) -> None:
        self.asset_id = asset_id
        self.reason = reason
        super().__init__(f"Failed to delete {asset_id}: {reason}")
