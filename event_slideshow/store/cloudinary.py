"""Async client for the Cloudinary upload, search and destroy endpoints."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
import hashlib
from pathlib import Path
import re
import time
from typing import Any, Final, Mapping

import httpx

from .exceptions import AssetNotFound, StoreError, StoreRequestError


API_BASE_URL: Final[str] = "https://api.cloudinary.com/v1_1"
IMAGE_RESOURCE: Final[str] = "image"
SECRET_PATTERN: Final[re.Pattern[str]] = re.compile(r"(signature|api_secret)=[^&\s'\"<>]+")


@dataclass(frozen=True, slots=True)
class Asset:
    """One stored image as reported by the media store."""

    id: str
    url: str
    collection: str
    created_at: datetime


def parse_timestamp(value: str) -> datetime:
    """Parse a Cloudinary ISO-8601 timestamp into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def asset_from_resource(resource: Mapping[str, Any], collection: str = "") -> Asset:
    """Build an Asset from an upload or search resource payload."""
    try:
        return Asset(
            id=str(resource["public_id"]),
            url=str(resource.get("secure_url") or resource["url"]),
            collection=str(resource.get("asset_folder") or resource.get("folder") or collection),
            created_at=parse_timestamp(str(resource["created_at"])),
        )
    except (KeyError, ValueError) as exc:
        raise StoreError(f"Malformed resource in store response: {exc}") from exc


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """Return the SHA-1 request signature for the given parameters."""
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if params[key] is not None and params[key] != ""
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryStore:
    """Remote media store speaking the Cloudinary REST API."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout_sec: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        clock=time.time,
    ) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self._clock = clock
        self._client = httpx.AsyncClient(
            base_url=f"{API_BASE_URL}/{cloud_name}",
            timeout=timeout_sec,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def upload(self, file_path: Path, collection: str) -> Asset:
        """Upload one image file into the given collection."""
        params = self._signed_params({"folder": collection})
        content = await asyncio.to_thread(file_path.read_bytes)
        files = {"file": (file_path.name, content, "application/octet-stream")}
        payload = await self._request_json(
            f"/{IMAGE_RESOURCE}/upload",
            data=params,
            files=files,
        )
        return asset_from_resource(payload, collection=collection)

    async def search(
        self,
        expression: str,
        sort_by: str = "created_at",
        direction: str = "desc",
        max_results: int = 30,
    ) -> list[Asset]:
        """Run a search expression and return the matching assets."""
        body = {
            "expression": expression,
            "sort_by": [{sort_by: direction}],
            "max_results": max_results,
        }
        payload = await self._request_json(
            "/resources/search",
            json_body=body,
            auth=(self._api_key, self._api_secret),
        )
        return [asset_from_resource(resource) for resource in payload.get("resources", [])]

    async def destroy(self, asset_id: str) -> None:
        """Delete one asset; raise AssetNotFound if the store has no such asset."""
        params = self._signed_params({"public_id": asset_id})
        payload = await self._request_json(f"/{IMAGE_RESOURCE}/destroy", data=params)
        result = payload.get("result")
        if result == "not found":
            raise AssetNotFound(f"Asset not found: {asset_id}")
        if result != "ok":
            raise StoreError(f"Unexpected destroy result for {asset_id}: {result}")

    def _signed_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        signed = dict(params)
        signed["timestamp"] = str(int(self._clock()))
        signed["signature"] = sign_params(signed, self._api_secret)
        signed["api_key"] = self._api_key
        return signed

    async def _request_json(
        self,
        endpoint: str,
        *,
        data: Mapping[str, Any] | None = None,
        json_body: Mapping[str, Any] | None = None,
        files: Mapping[str, tuple[str, bytes, str]] | None = None,
        auth: tuple[str, str] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.post(
                endpoint,
                data=data,
                json=json_body,
                files=files,
                auth=auth,
            )
        except httpx.TimeoutException as exc:
            raise StoreRequestError(f"Store request timed out: {endpoint}") from exc
        except httpx.HTTPError as exc:
            raise StoreRequestError(
                f"Store request failed: {_redact_secrets(str(exc))}"
            ) from exc

        if response.is_error:
            raise StoreRequestError(
                f"Store returned {response.status_code} for {endpoint}: "
                f"{_redact_secrets(_error_message(response))}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise StoreRequestError(f"Store returned invalid JSON for {endpoint}") from exc


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json()["error"]["message"])
    except (ValueError, KeyError, TypeError):
        return response.text


def _redact_secrets(text: str) -> str:
    return SECRET_PATTERN.sub(lambda match: f"{match.group(1)}=<redacted>", text)
