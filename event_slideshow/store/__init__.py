"""Remote media store integration."""

from .cloudinary import Asset, CloudinaryStore, asset_from_resource, parse_timestamp, sign_params
from .exceptions import AssetNotFound, StoreError, StoreRequestError

__all__ = [
    "Asset",
    "AssetNotFound",
    "CloudinaryStore",
    "StoreError",
    "StoreRequestError",
    "asset_from_resource",
    "parse_timestamp",
    "sign_params",
]
