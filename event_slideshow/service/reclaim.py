"""Stale media reclamation rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import logging

from event_slideshow.errors import ReclaimItemFailed
from event_slideshow.store import CloudinaryStore, StoreError


LOGGER = logging.getLogger(__name__)


@dataclass
class ReclaimResult:
    """Outcome of one reclamation pass."""

    deleted: list[str] = field(default_factory=list)
    errors: list[tuple[str, str]] = field(default_factory=list)


def collection_expression(collection: str) -> str:
    """Search expression matching every image in a collection."""
    return f"folder:{collection} AND resource_type:image"


async def reclaim(
    store: CloudinaryStore,
    collection: str,
    retention_window: timedelta,
    page_size: int,
    now: datetime | None = None,
) -> ReclaimResult:
    """Delete assets of a collection older than the retention window.

    Only the oldest `page_size` assets are examined per pass. Failures are
    logged and recorded in the result; this function does not raise on store
    errors.
    """
    result = ReclaimResult()
    try:
        assets = await store.search(
            collection_expression(collection),
            sort_by="created_at",
            direction="asc",
            max_results=page_size,
        )
    except StoreError as exc:
        LOGGER.error("Listing %s for reclamation failed: %s", collection, exc)
        return result

    now = now or datetime.now(timezone.utc)
    cutoff = now - retention_window
    for asset in assets:
        if asset.created_at >= cutoff:
            continue
        try:
            await store.destroy(asset.id)
        except StoreError as exc:
            failure = ReclaimItemFailed(asset.id, str(exc))
            LOGGER.warning("%s", failure)
            result.errors.append((failure.asset_id, failure.reason))
            continue
        LOGGER.info("Deleted expired asset %s (created_at=%s)", asset.id, asset.created_at)
        result.deleted.append(asset.id)
    return result
