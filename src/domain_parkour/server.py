"""
HTTP surface.

Exposes the page handler as a catch-all GET route on a FastAPI app so the
generator can be served by uvicorn (or any ASGI host) behind the domains
it answers for.
"""

from contextlib import asynccontextmanager
from typing import Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response

from . import __version__
from .config import Settings
from .event_logger import EventLogger
from .handler import create_kv_store, create_page_handler
from .kv_client import CloudflareKVClient, KVStore


def create_app(
    settings: Settings,
    environment: Mapping[str, str],
    logger: Optional[EventLogger] = None,
    kv_store: Optional[KVStore] = None,
) -> FastAPI:
    """
    Create the ASGI application.

    Args:
        settings: Runtime settings
        environment: Flat environment table for per-field overrides
        logger: Optional event logger
        kv_store: Store to use instead of the one named by the settings

    Returns:
        FastAPI app answering GET on every path with the page for the
        request's hostname
    """
    store = kv_store if kv_store is not None else create_kv_store(settings, logger)
    handler = create_page_handler(settings, environment, logger, kv_store=store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Share one connection pool for all KV lookups while serving.
        if isinstance(store, CloudflareKVClient):
            async with store:
                yield
        else:
            yield

    app = FastAPI(
        title="Domain Parkour",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.page_handler = handler

    @app.get("/{path:path}")
    async def serve_page(request: Request, path: str) -> Response:
        page = await request.app.state.page_handler.handle(
            str(request.url), cookies=request.cookies
        )
        return Response(
            content=page.body,
            status_code=page.status_code,
            headers=page.headers,
        )

    return app
