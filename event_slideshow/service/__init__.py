"""Service-layer business logic."""

from .gallery import recent_locators
from .intake import store_upload
from .reclaim import ReclaimResult, reclaim

__all__ = ["ReclaimResult", "reclaim", "recent_locators", "store_upload"]
