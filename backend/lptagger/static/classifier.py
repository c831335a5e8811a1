"""Request classification: API, static asset or client-side application route."""

import enum
import posixpath

from lptagger.static.content_types import CONTENT_TYPES

# Every extension with a known content type is treated as a static asset
STATIC_EXTENSIONS = frozenset(CONTENT_TYPES)


class RequestKind(str, enum.Enum):
    API = "api"
    STATIC_CANDIDATE = "static_candidate"
    APPLICATION_ROUTE = "application_route"


def is_api_path(raw_path: str, api_prefix: str = "/api/") -> bool:
    """True for paths under the reserved prefix, including the bare prefix itself."""
    return raw_path.startswith(api_prefix) or raw_path == api_prefix.rstrip("/")


def has_static_extension(raw_path: str) -> bool:
    name = posixpath.basename(raw_path)
    _, ext = posixpath.splitext(name)
    return ext[1:].lower() in STATIC_EXTENSIONS


def classify(raw_path: str, api_prefix: str = "/api/") -> RequestKind:
    """Classify a request path.

    The reserved API prefix always wins. The root document and any path
    whose last segment carries a known static extension are static
    candidates; everything else is left to the SPA.
    """
    if is_api_path(raw_path, api_prefix):
        return RequestKind.API
    if raw_path in ("", "/") or has_static_extension(raw_path):
        return RequestKind.STATIC_CANDIDATE
    return RequestKind.APPLICATION_ROUTE
