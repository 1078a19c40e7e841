"""Server entry point: load settings, announce URLs, serve the app."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
import uvicorn

from event_slideshow.config import AppSettings, load_settings
from event_slideshow.lan import get_local_ip, render_qr
from event_slideshow.web.app import create_app


LOGGER = logging.getLogger("event_slideshow.web")


def announce(settings: AppSettings) -> None:
    """Log where guests can reach the app, with a QR code on a LAN."""
    if settings.public_base_url:
        base_url = settings.public_base_url.rstrip("/")
        LOGGER.info("Upload: %s/upload", base_url)
        LOGGER.info("Gallery: %s/gallery", base_url)
        return

    base_url = f"http://{get_local_ip()}:{settings.port}"
    upload_url = f"{base_url}/upload"
    LOGGER.info("Upload: %s", upload_url)
    LOGGER.info("Gallery: %s/gallery", base_url)
    print(render_qr(upload_url), flush=True)


def run() -> None:
    """Run the web server with the periodic reclamation loop."""
    load_dotenv()
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    LOGGER.info(
        "Cloudinary cloud=%s collection=%s retention=%ss",
        settings.cloud_name,
        settings.collection,
        settings.retention_seconds,
    )
    app = create_app(settings)
    announce(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
