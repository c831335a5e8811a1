"""SPA serving middleware.

Every non-API GET/HEAD request goes through these stages in order, and
the first one that produces a response wins:

  1. API bypass       -- paths under the API prefix go to the routers.
  2. Direct match     -- a regular file inside the build root is served
                         with its content type. Paths escaping the root 404.
  3. Static miss      -- asset-looking paths that were not found 404;
                         they never fall back to the SPA document.
  4. Generic fallback -- Starlette's StaticFiles gets a second look
                         (directory routes with their own index.html).
  5. SPA fallback     -- anything left gets index.html.
"""

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import FileResponse, PlainTextResponse, Response
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp

from lptagger.static.classifier import RequestKind, classify, is_api_path
from lptagger.static.content_types import HTML
from lptagger.static.guard import ResolvedAsset, resolve_asset
from lptagger.static.locator import BuildRoot

logger = logging.getLogger(__name__)

SERVED_METHODS = ("GET", "HEAD")


class Outcome(str, enum.Enum):
    API_BYPASS = "api_bypass"
    STATIC_HIT = "static_hit"
    STATIC_MISS = "static_miss"
    SPA_FALLBACK = "spa_fallback"


@dataclass(frozen=True)
class RouteDecision:
    outcome: Outcome
    asset: Optional[ResolvedAsset] = None


def decide(root: Path, raw_path: str, api_prefix: str = "/api/") -> RouteDecision:
    """Run the API bypass, direct match and static miss stages for a path.

    ``SPA_FALLBACK`` means none of them claimed the request and it should
    continue to the generic file lookup and then the entry document.
    """
    kind = classify(raw_path, api_prefix)
    if kind is RequestKind.API:
        return RouteDecision(Outcome.API_BYPASS)

    asset = resolve_asset(root, raw_path)
    if asset is None:
        logger.warning(f"Rejected request path outside build root: {raw_path!r}")
        return RouteDecision(Outcome.STATIC_MISS)

    if asset.is_file:
        return RouteDecision(Outcome.STATIC_HIT, asset)
    if kind is RequestKind.STATIC_CANDIDATE:
        return RouteDecision(Outcome.STATIC_MISS, asset)
    return RouteDecision(Outcome.SPA_FALLBACK, asset)


def not_found() -> PlainTextResponse:
    return PlainTextResponse("Not Found", status_code=404)


class SPAStaticMiddleware(BaseHTTPMiddleware):
    """Serve the built front-end and fall back to index.html for client routes."""

    def __init__(self, app: ASGIApp, build_root: BuildRoot, api_prefix: str = "/api/") -> None:
        super().__init__(app)
        self.build_root = build_root
        self.api_prefix = api_prefix
        # html=True resolves directory/index.html; check_dir=False because
        # a missing build directory must not stop the process
        self.files = StaticFiles(directory=build_root.path, html=True, check_dir=False)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        raw_path = request.scope["path"]
        if is_api_path(raw_path, self.api_prefix) or request.method not in SERVED_METHODS:
            return await call_next(request)

        decision = decide(self.build_root.path, raw_path, self.api_prefix)
        if decision.outcome is Outcome.API_BYPASS:
            return await call_next(request)
        if decision.outcome is Outcome.STATIC_HIT:
            return FileResponse(decision.asset.path, media_type=decision.asset.content_type)
        if decision.outcome is Outcome.STATIC_MISS:
            return not_found()

        response = await self._generic_lookup(request, raw_path)
        if response is not None:
            return response
        return self._spa_fallback(raw_path)

    async def _generic_lookup(self, request: Request, raw_path: str) -> Optional[Response]:
        """Second chance through StaticFiles. None means it had nothing either."""
        try:
            response = await self.files.get_response(raw_path.lstrip("/"), request.scope)
        except HTTPException as exc:
            if exc.status_code == 404:
                return None
            return PlainTextResponse(str(exc.detail), status_code=exc.status_code)
        # StaticFiles answers with 404.html (status 404) when the bundle ships one
        if response.status_code == 404:
            return None
        return response

    def _spa_fallback(self, raw_path: str) -> Response:
        if is_api_path(raw_path, self.api_prefix):
            return not_found()

        index = self.build_root.index
        if not os.path.isfile(index):
            logger.error(f"SPA entry document not found: {index}")
            return not_found()
        return FileResponse(index, media_type=HTML)
