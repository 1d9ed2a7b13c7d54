import asyncio
import re
import secrets
import time
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.core.scraper.renderer import RenderError, Renderer
from src.core.utils.logger import get_logger
from src.core.utils.settings import Settings, get_settings
from src.core.utils.standards_extractor import extract

logger = get_logger(__name__)

HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)


def is_authorized(header: Optional[str], token: str) -> bool:
    """Accept every request when no token is configured, else require 'Bearer <token>'."""
    if not token:
        return True
    return secrets.compare_digest(
        (header or "").encode("utf-8"), f"Bearer {token}".encode("utf-8")
    )


async def read_target_url(request: Request) -> Optional[str]:
    """Return the http(s) URL from the JSON body, or None if it is missing or invalid."""
    try:
        body: Any = await request.json()
    except ValueError:
        return None

    url = body.get("url") if isinstance(body, dict) else None
    if not isinstance(url, str) or not HTTP_URL.match(url):
        return None
    return url


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def create_app(
    renderer: Optional[Renderer] = None, settings: Optional[Settings] = None
) -> FastAPI:
    """
    FastAPI application factory.

    Args:
        renderer: Page renderer; a crawl4ai-backed Renderer is built when omitted
        settings: Process settings; read from the environment when omitted

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(title="unicart-scraper", docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.renderer = renderer or Renderer(settings)

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    @app.post("/scrape")
    async def scrape(request: Request) -> JSONResponse:
        if not is_authorized(
            request.headers.get("authorization"), app.state.settings.scraper_token
        ):
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"ok": False, "error": "unauthorized"},
            )

        url = await read_target_url(request)
        if url is None:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"ok": False, "error": "invalid url"},
            )

        started = time.monotonic()
        try:
            page = await app.state.renderer.render(url)
        except RenderError as exc:
            logger.warning(
                "Render failed", extra={"url": url, "error": exc.message}
            )
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content={
                    "ok": False,
                    "url": url,
                    "error": exc.message,
                    "ms": _elapsed_ms(started),
                },
            )

        record = await asyncio.to_thread(extract, page.html, page.url)
        elapsed = _elapsed_ms(started)

        logger.info(
            "Scrape finished",
            extra={"url": url, "final_url": page.url, "ms": elapsed, **record.to_payload()},
        )
        return JSONResponse(
            content={
                "ok": True,
                "url": url,
                "html": page.html,
                **record.to_payload(),
                "ms": elapsed,
            }
        )

    return app
