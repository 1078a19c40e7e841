from __future__ import annotations

from datetime import datetime, timedelta, timezone
import unittest

from event_slideshow.errors import QueryFailed
from event_slideshow.service.gallery import dedup_locators, recent_locators
from event_slideshow.store import StoreRequestError
from tests.fakes import FakeMediaStore, make_asset


NOW = datetime(2026, 3, 1, 20, 0, tzinfo=timezone.utc)
RETENTION = timedelta(minutes=5)


class RecentLocatorsTests(unittest.IsolatedAsyncioTestCase):
    async def test_newest_first_and_limited(self) -> None:
        store = FakeMediaStore(
            [make_asset(f"slideshow/{i}", NOW - timedelta(seconds=i)) for i in range(4)]
        )

        locators = await recent_locators(store, "slideshow", RETENTION, limit=3, now=NOW)

        self.assertEqual(
            locators,
            [
                "https://res.cloudinary.com/demo/image/upload/slideshow/0.jpg",
                "https://res.cloudinary.com/demo/image/upload/slideshow/1.jpg",
                "https://res.cloudinary.com/demo/image/upload/slideshow/2.jpg",
            ],
        )
        self.assertEqual(store.search_calls[0]["direction"], "desc")
        self.assertEqual(store.search_calls[0]["max_results"], 3)

    async def test_duplicate_locators_listed_once(self) -> None:
        store = FakeMediaStore(
            [
                make_asset("slideshow/a", NOW, url="https://cdn.example/a.jpg"),
                make_asset("slideshow/b", NOW - timedelta(seconds=1), url="https://cdn.example/a.jpg"),
            ]
        )
        store.duplicate_results = True

        locators = await recent_locators(store, "slideshow", RETENTION, now=NOW)

        self.assertEqual(locators, ["https://cdn.example/a.jpg"])

    async def test_expired_assets_are_not_listed(self) -> None:
        store = FakeMediaStore(
            [
                make_asset("slideshow/stale", NOW - timedelta(minutes=50), url="https://cdn.example/stale.jpg"),
                make_asset("slideshow/edge", NOW - RETENTION, url="https://cdn.example/edge.jpg"),
                make_asset(
                    "slideshow/fresh",
                    NOW - RETENTION + timedelta(seconds=1),
                    url="https://cdn.example/fresh.jpg",
                ),
            ]
        )

        locators = await recent_locators(store, "slideshow", RETENTION, now=NOW)

        self.assertEqual(locators, ["https://cdn.example/fresh.jpg"])
        self.assertEqual(store.destroy_calls, [])
        self.assertEqual(len(store.assets), 3)

    async def test_store_failure_raises_query_failed(self) -> None:
        store = FakeMediaStore()
        store.search_error = StoreRequestError("Store returned 401 for /resources/search", status_code=401)

        with self.assertRaises(QueryFailed):
            await recent_locators(store, "slideshow", RETENTION)

    def test_dedup_keeps_first_seen_order(self) -> None:
        self.assertEqual(dedup_locators(["b", "a", "b", "c", "a"]), ["b", "a", "c"])


if __name__ == "__main__":
    unittest.main()
