from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
import re

from event_slideshow.config import AppSettings
from event_slideshow.store import Asset, AssetNotFound, StoreRequestError


FOLDER_PATTERN = re.compile(r"folder:(\S+)")


def make_settings(**overrides) -> AppSettings:
    settings = AppSettings(
        cloud_name="demo",
        api_key="key123",
        api_secret="secret456",
        host="127.0.0.1",
        port=3000,
        collection="slideshow",
        retention_seconds=300,
        reclaim_interval_seconds=0,
        reclaim_page_size=100,
        reclaim_on_upload=True,
        gallery_limit=30,
        store_timeout_seconds=5.0,
        event_title="Test party",
        public_base_url=None,
        log_level="INFO",
    )
    return replace(settings, **overrides)


def make_asset(asset_id: str, created_at: datetime, collection: str = "slideshow", url: str | None = None) -> Asset:
    return Asset(
        id=asset_id,
        url=url or f"https://res.cloudinary.com/demo/image/upload/{asset_id}.jpg",
        collection=collection,
        created_at=created_at,
    )


class FakeMediaStore:
    """In-memory stand-in for CloudinaryStore."""

    def __init__(self, assets: list[Asset] | None = None) -> None:
        self.assets: dict[str, Asset] = {asset.id: asset for asset in assets or []}
        self.failing_ids: set[str] = set()
        self.search_error: Exception | None = None
        self.upload_error: Exception | None = None
        self.duplicate_results = False
        self.uploaded_paths: list[Path] = []
        self.uploaded_payloads: list[bytes] = []
        self.search_calls: list[dict] = []
        self.destroy_calls: list[str] = []
        self.closed = False

    async def upload(self, file_path: Path, collection: str) -> Asset:
        self.uploaded_paths.append(file_path)
        self.uploaded_payloads.append(file_path.read_bytes())
        if self.upload_error is not None:
            raise self.upload_error
        asset = make_asset(
            f"{collection}/photo{len(self.uploaded_paths)}",
            created_at=datetime.now(timezone.utc),
            collection=collection,
        )
        self.assets[asset.id] = asset
        return asset

    async def search(
        self,
        expression: str,
        sort_by: str = "created_at",
        direction: str = "desc",
        max_results: int = 30,
    ) -> list[Asset]:
        self.search_calls.append(
            {
                "expression": expression,
                "sort_by": sort_by,
                "direction": direction,
                "max_results": max_results,
            }
        )
        if self.search_error is not None:
            raise self.search_error
        match = FOLDER_PATTERN.search(expression)
        found = [
            asset
            for asset in self.assets.values()
            if match is None or asset.collection == match.group(1)
        ]
        found.sort(key=lambda asset: asset.created_at, reverse=direction == "desc")
        found = found[:max_results]
        if self.duplicate_results:
            found = found + found
        return found

    async def destroy(self, asset_id: str) -> None:
        self.destroy_calls.append(asset_id)
        if asset_id in self.failing_ids:
            raise StoreRequestError(f"Store returned 500 for destroy {asset_id}", status_code=500)
        if asset_id not in self.assets:
            raise AssetNotFound(f"Asset not found: {asset_id}")
        del self.assets[asset_id]

    async def close(self) -> None:
        self.closed = True
