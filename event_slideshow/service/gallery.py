"""Recent-asset listing for the gallery views."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging

from event_slideshow.errors import QueryFailed
from event_slideshow.store import CloudinaryStore, StoreError

from .reclaim import collection_expression


LOGGER = logging.getLogger(__name__)
DEFAULT_GALLERY_LIMIT = 30


def dedup_locators(locators: list[str]) -> list[str]:
    """Drop repeated locators, keeping first-seen order."""
    return list(dict.fromkeys(locators))


async def recent_locators(
    store: CloudinaryStore,
    collection: str,
    retention_window: timedelta,
    limit: int = DEFAULT_GALLERY_LIMIT,
    now: datetime | None = None,
) -> list[str]:
    """Return the newest unexpired asset locators of a collection, without duplicates.

    Assets already past the retention window are left out of the listing but
    not deleted; deletion belongs to the reclamation pass.
    """
    try:
        assets = await store.search(
            collection_expression(collection),
            sort_by="created_at",
            direction="desc",
            max_results=limit,
        )
    except StoreError as exc:
        LOGGER.error("Listing %s for the gallery failed: %s", collection, exc)
        raise QueryFailed("Could not load the gallery.") from exc

    now = now or datetime.now(timezone.utc)
    cutoff = now - retention_window
    return dedup_locators([asset.url for asset in assets if asset.created_at > cutoff])
