"""Periodic reclamation worker."""

from __future__ import annotations

import asyncio
import logging
import time

from dotenv import load_dotenv

from event_slideshow.config import AppSettings, load_settings
from event_slideshow.service import ReclaimResult, reclaim
from event_slideshow.store import CloudinaryStore


LOGGER = logging.getLogger("event_slideshow.worker")


def build_store(settings: AppSettings) -> CloudinaryStore:
    """Create the media store client from settings."""
    return CloudinaryStore(
        cloud_name=settings.cloud_name,
        api_key=settings.api_key,
        api_secret=settings.api_secret,
        timeout_sec=settings.store_timeout_seconds,
    )


async def reclaim_pass(store: CloudinaryStore, settings: AppSettings) -> ReclaimResult:
    """Run one reclamation pass with the configured policy and log a summary."""
    result = await reclaim(
        store,
        collection=settings.collection,
        retention_window=settings.retention_window,
        page_size=settings.reclaim_page_size,
    )
    LOGGER.info(
        "Reclamation pass on %s done; deleted=%s failed=%s",
        settings.collection,
        len(result.deleted),
        len(result.errors),
    )
    return result


async def reclaim_forever(store: CloudinaryStore, settings: AppSettings) -> None:
    """Run reclamation passes on a fixed interval until cancelled."""
    interval = settings.reclaim_interval_seconds
    LOGGER.info("Starting reclamation loop with interval=%ss", interval)
    while True:
        loop_started = time.monotonic()
        try:
            await reclaim_pass(store, settings)
        except Exception as exc:
            LOGGER.exception("Reclamation iteration failed: %s", exc)

        elapsed = time.monotonic() - loop_started
        await asyncio.sleep(max(0.0, interval - elapsed))


async def _run_async(settings: AppSettings) -> None:
    store = build_store(settings)
    try:
        await reclaim_forever(store, settings)
    finally:
        await store.close()


def run() -> None:
    """Run the reclamation loop forever in its own process."""
    load_dotenv()
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if settings.reclaim_interval_seconds <= 0:
        raise RuntimeError("RECLAIM_INTERVAL_SECONDS must be positive for the standalone worker")
    asyncio.run(_run_async(settings))


if __name__ == "__main__":
    run()
