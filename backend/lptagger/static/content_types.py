"""Extension to MIME type lookup for served build assets."""

import mimetypes
from pathlib import Path
from typing import Optional

OCTET_STREAM = "application/octet-stream"
HTML = "text/html; charset=utf-8"

CONTENT_TYPES = {
    # Scripts and styles
    "js": "application/javascript; charset=utf-8",
    "mjs": "application/javascript; charset=utf-8",
    "cjs": "application/javascript; charset=utf-8",
    "css": "text/css; charset=utf-8",
    # Markup and text
    "html": HTML,
    "htm": HTML,
    "txt": "text/plain; charset=utf-8",
    "xml": "application/xml; charset=utf-8",
    # Structured data and source maps
    "json": "application/json; charset=utf-8",
    "map": "application/json; charset=utf-8",
    "webmanifest": "application/manifest+json; charset=utf-8",
    # Images
    "ico": "image/x-icon",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "avif": "image/avif",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    # Fonts
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "eot": "application/vnd.ms-fontobject",
    # Media and binaries
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "wasm": "application/wasm",
}


def content_type_for(extension: str) -> Optional[str]:
    """Return the forced Content-Type for an extension, or None if unknown.

    Accepts ``"js"``, ``".js"`` or ``".JS"`` alike.
    """
    return CONTENT_TYPES.get(extension.lower().lstrip("."))


def guess_content_type(path: Path) -> str:
    """Content-Type for a file: the table first, then mimetypes, then octet-stream."""
    forced = content_type_for(path.suffix)
    if forced:
        return forced
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or OCTET_STREAM
