"""Photo upload intake flow."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from tempfile import NamedTemporaryFile

from event_slideshow.errors import MissingPayload, UploadFailed
from event_slideshow.store import Asset, CloudinaryStore, StoreError


LOGGER = logging.getLogger(__name__)
CHUNK_SIZE = 1024 * 1024


async def store_upload(store: CloudinaryStore, upload, collection: str) -> Asset:
    """Spool an uploaded photo to a temp file and push it to the media store.

    `upload` is a Starlette ``UploadFile`` (or anything with ``filename`` and an
    async ``read``). The temp copy is removed whether or not the upload works.
    """
    if upload is None or not getattr(upload, "filename", None):
        raise MissingPayload("No image was received.")

    suffix = Path(upload.filename).suffix
    temp_file = NamedTemporaryFile(suffix=suffix, delete=False)
    temp_path = Path(temp_file.name)
    try:
        size = 0
        with temp_file:
            while chunk := await upload.read(CHUNK_SIZE):
                await asyncio.to_thread(temp_file.write, chunk)
                size += len(chunk)
        if size == 0:
            raise MissingPayload("The received image is empty.")

        try:
            asset = await store.upload(temp_path, collection=collection)
        except StoreError as exc:
            LOGGER.error("Upload of %s to %s failed: %s", upload.filename, collection, exc)
            raise UploadFailed("Could not store the image.") from exc
        LOGGER.info("Uploaded %s as %s: %s", upload.filename, asset.id, asset.url)
        return asset
    finally:
        _discard(temp_path)


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        LOGGER.warning("Could not remove temp upload %s: %s", path, exc)
