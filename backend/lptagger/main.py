"""FastAPI application entry point with CORS, tag routers, and the SPA front-end."""

import json
import logging
import re as _re
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lptagger.config import settings
from lptagger.database import init_db
from lptagger.routers import tags, landing_pages, creatives
from lptagger.schemas import HealthResponse
from lptagger.static.locator import BuildRoot, locate
from lptagger.static.pipeline import SPAStaticMiddleware

logger = logging.getLogger(__name__)

# Naive ISO 8601 datetime, as serialized from SQLite rows
_NAIVE_DATETIME_RE = _re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?$")


def _add_utc_to_datetimes(obj):
    """Mark naive datetime strings in a JSON payload as UTC.

    Tag timestamps come back from SQLite without an offset; the admin UI
    parses them with new Date(), which would otherwise assume local time.
    """
    if isinstance(obj, dict):
        return {k: _add_utc_to_datetimes(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_add_utc_to_datetimes(v) for v in obj]
    elif isinstance(obj, str) and _NAIVE_DATETIME_RE.match(obj):
        return obj + "+00:00"
    return obj


class UTCJSONResponse(JSONResponse):
    """Default API response class; tags timestamps as UTC before encoding."""

    def render(self, content) -> bytes:
        patched = _add_utc_to_datetimes(content)
        return json.dumps(
            patched,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    await init_db()
    yield


def create_app(
    build_root: Optional[BuildRoot] = None,
    api_prefix: Optional[str] = None,
) -> FastAPI:
    """Assemble the API and the front-end server.

    The build root is located once here unless one is passed in. Every
    router is mounted under the reserved prefix the front-end middleware
    hands through to them.
    """
    if build_root is None:
        build_root = locate(settings.environment_signals())

    reserved_prefix = "/" + (api_prefix or settings.API_PREFIX).strip("/") + "/"
    api_prefix = reserved_prefix.rstrip("/")
    app = FastAPI(
        title="LP Tagger API",
        description=(
            "Tag management for landing pages and creatives, plus the "
            "single-page admin front-end."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url=f"{api_prefix}/docs",
        redoc_url=f"{api_prefix}/redoc",
        openapi_url=f"{api_prefix}/openapi.json",
        default_response_class=UTCJSONResponse,
    )
    app.state.build_root = build_root

    # Register API routers
    app.include_router(tags.router, prefix=api_prefix)
    app.include_router(landing_pages.router, prefix=api_prefix)
    app.include_router(creatives.router, prefix=api_prefix)

    @app.get(f"{api_prefix}/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check, including where the front-end is served from."""
        return HealthResponse(
            status="healthy",
            static_root=str(build_root.path),
            static_root_found=build_root.found,
        )

    # Front-end: everything outside the API prefix
    app.add_middleware(SPAStaticMiddleware, build_root=build_root, api_prefix=reserved_prefix)

    # CORS middleware (added last so it wraps the front-end too)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"API mounted under {reserved_prefix}, front-end root {build_root.path}")
    return app


app = create_app()
