"""FastAPI web app for photo uploads and the shared gallery."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager, suppress
import logging
from pathlib import Path
from urllib.parse import urlencode, urlparse

from fastapi import BackgroundTasks, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.datastructures import UploadFile

from event_slideshow.config import AppSettings, load_settings
from event_slideshow.errors import MissingPayload, QueryFailed, UploadFailed
from event_slideshow.service import recent_locators, store_upload
from event_slideshow.store import CloudinaryStore
from event_slideshow.worker.main import build_store, reclaim_forever, reclaim_pass


APP_ROOT = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(APP_ROOT / "templates"))
LOGGER = logging.getLogger("event_slideshow.web")
IMAGE_URL_SCHEMES = {"http", "https"}


def _is_image_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme.lower() in IMAGE_URL_SCHEMES and bool(parsed.netloc)


def create_app(
    settings: AppSettings | None = None,
    store: CloudinaryStore | None = None,
) -> FastAPI:
    """Build the web app around an explicitly constructed media store.

    When `store` is omitted one is created from `settings` at startup and
    closed at shutdown. The periodic reclamation loop runs for the app's
    lifetime unless the interval is zero.
    """
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_store = None
        if getattr(app.state, "store", None) is None:
            owned_store = build_store(settings)
            app.state.store = owned_store

        sweeper: asyncio.Task | None = None
        if settings.reclaim_interval_seconds > 0:
            sweeper = asyncio.create_task(reclaim_forever(app.state.store, settings))
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.cancel()
                with suppress(asyncio.CancelledError):
                    await sweeper
            if owned_store is not None:
                await owned_store.close()
                app.state.store = None

    app = FastAPI(title="Event Slideshow", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.mount("/static", StaticFiles(directory=str(APP_ROOT / "static")), name="static")

    async def _gallery_locators() -> tuple[list[str], bool]:
        try:
            locators = await recent_locators(
                app.state.store,
                collection=settings.collection,
                retention_window=settings.retention_window,
                limit=settings.gallery_limit,
            )
        except QueryFailed:
            return [], False
        return locators, True

    @app.get("/")
    def index() -> RedirectResponse:
        return RedirectResponse("/upload", status_code=302)

    @app.get("/upload", response_class=HTMLResponse)
    def upload_page(request: Request) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            "upload.html",
            {"event_title": settings.event_title},
        )

    @app.post("/upload")
    async def upload_photo(request: Request, background_tasks: BackgroundTasks) -> Response:
        try:
            async with request.form() as form:
                photo = form.get("photo")
                if not isinstance(photo, UploadFile):
                    photo = None
                asset = await store_upload(app.state.store, photo, collection=settings.collection)
        except MissingPayload as exc:
            return PlainTextResponse(str(exc), status_code=400)
        except UploadFailed as exc:
            return PlainTextResponse(str(exc), status_code=500)

        if settings.reclaim_on_upload:
            background_tasks.add_task(reclaim_pass, app.state.store, settings)
        return RedirectResponse(
            f"/slideshow?{urlencode({'img': asset.url})}",
            status_code=302,
        )

    @app.get("/slideshow", response_class=HTMLResponse)
    def slideshow_page(request: Request, img: str | None = Query(default=None)) -> Response:
        if not img or not _is_image_url(img):
            return RedirectResponse("/upload", status_code=302)
        return templates.TemplateResponse(request, "slideshow.html", {"image_url": img})

    @app.get("/gallery", response_class=HTMLResponse)
    async def gallery_page(request: Request) -> HTMLResponse:
        images, loaded = await _gallery_locators()
        return templates.TemplateResponse(
            request,
            "gallery.html",
            {
                "event_title": settings.event_title,
                "images": images,
                "loaded": loaded,
            },
        )

    @app.get("/images")
    async def images_api() -> JSONResponse:
        images, _ = await _gallery_locators()
        return JSONResponse(images)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
