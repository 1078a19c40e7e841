"""Run one stale-photo reclamation pass against the configured collection."""

from __future__ import annotations

import argparse
import asyncio
from datetime import timedelta
import json
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from event_slideshow.config import AppSettings, load_settings
from event_slideshow.service import ReclaimResult, reclaim
from event_slideshow.worker.main import build_store


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Delete photos older than the retention window from the slideshow collection."
    )
    parser.add_argument(
        "--retention-seconds",
        type=int,
        default=None,
        help="Override RETENTION_SECONDS for this pass.",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Override RECLAIM_PAGE_SIZE for this pass.",
    )
    parser.add_argument(
        "--collection",
        default=None,
        help="Override SLIDESHOW_COLLECTION for this pass.",
    )
    return parser


async def _reclaim_once(settings: AppSettings, args: argparse.Namespace) -> ReclaimResult:
    store = build_store(settings)
    try:
        retention_window = settings.retention_window
        if args.retention_seconds is not None:
            retention_window = timedelta(seconds=args.retention_seconds)
        return await reclaim(
            store,
            collection=args.collection or settings.collection,
            retention_window=retention_window,
            page_size=args.page_size or settings.reclaim_page_size,
        )
    finally:
        await store.close()


def main(argv: list[str] | None = None) -> int:
    """Run the script and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    load_dotenv()

    try:
        settings = load_settings()
    except RuntimeError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    result = asyncio.run(_reclaim_once(settings, args))

    print(
        json.dumps(
            {
                "deleted": result.deleted,
                "errors": [{"id": asset_id, "reason": reason} for asset_id, reason in result.errors],
            },
            ensure_ascii=False,
        )
    )
    return 1 if result.errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
