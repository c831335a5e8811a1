"""Preview server for the frontend production build (no API routes)."""
import logging
from pathlib import Path

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware

from lptagger.static.locator import EnvironmentSignals, locate
from lptagger.static.pipeline import SPAStaticMiddleware

logging.basicConfig(level=logging.INFO)

# Serve ./dist next to this file, whatever the working directory is
build_root = locate(EnvironmentSignals(
    is_development=False,
    is_deployed=False,
    cwd=Path.cwd(),
    program_dir=Path(__file__).resolve().parent,
    override=Path(__file__).resolve().parent / "dist",
))

# Static assets, directory indexes and the index.html fallback for client routes;
# /api/ paths reach the empty router and 404
app = Starlette(middleware=[Middleware(SPAStaticMiddleware, build_root=build_root)])

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=5273)
