"""Print a terminal QR code pointing guests at the upload page."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from event_slideshow.lan import get_local_ip, render_qr


def build_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Print a QR code for the slideshow upload page."
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Public base URL (default: http://<lan-ip>:<port>).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port used when building a LAN URL (default: 3000).",
    )
    parser.add_argument(
        "--invert",
        action="store_true",
        help="Invert colours for light-on-dark terminals.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the script and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    base_url = (args.base_url or f"http://{get_local_ip()}:{args.port}").rstrip("/")
    upload_url = f"{base_url}/upload"
    print(render_qr(upload_url, invert=args.invert))
    print(f"Upload: {upload_url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
