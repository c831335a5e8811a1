"""Map request paths to files inside the build root without ever leaving it."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from lptagger.static.content_types import guess_content_type

INDEX_DOCUMENT = "index.html"


@dataclass(frozen=True)
class ResolvedAsset:
    path: Path
    content_type: str
    is_file: bool


def _is_contained(candidate: str, root: str) -> bool:
    return candidate == root or candidate.startswith(root.rstrip(os.sep) + os.sep)


def resolve(build_root: Path, raw_path: str) -> Optional[Path]:
    """Return the absolute file path for ``raw_path`` under ``build_root``.

    ``/`` maps to ``index.html``. Otherwise one leading slash is stripped
    and the rest is joined onto the root with ``..`` and ``.`` collapsed.
    Returns None when the normalized path is not inside the root.
    Containment is checked on the final normalized string, not per segment.
    """
    if "\x00" in raw_path:
        return None

    if raw_path in ("", "/"):
        relative = INDEX_DOCUMENT
    elif raw_path.startswith("/"):
        relative = raw_path[1:]
    else:
        relative = raw_path

    root = os.path.normpath(os.path.abspath(build_root))
    candidate = os.path.normpath(os.path.join(root, relative))

    if not _is_contained(candidate, root):
        return None
    return Path(candidate)


def resolve_asset(build_root: Path, raw_path: str) -> Optional[ResolvedAsset]:
    """Resolve a request path and describe the file it points at."""
    path = resolve(build_root, raw_path)
    if path is None:
        return None
    return ResolvedAsset(
        path=path,
        content_type=guess_content_type(path),
        is_file=os.path.isfile(path),
    )
