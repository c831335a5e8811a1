"""Build output discovery.

The compiled front-end bundle lives in different places depending on how
the process was started:

  * development: ``frontend/dist`` next to the backend sources,
  * deployed bundle: a ``public`` directory beside (or one level above)
    the packaged program, or the working directory's build output,
  * plain production run: ``frontend/dist`` under the working directory.

Candidates are checked in order and the first existing directory wins.
When none exists the first candidate is kept anyway so the server still
starts; every asset request will then 404 until the bundle is built.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)

DIST_SUBDIR = Path("frontend") / "dist"
PUBLIC_SUBDIR = "public"
SAMPLE_SIZE = 10


@dataclass(frozen=True)
class EnvironmentSignals:
    is_development: bool
    is_deployed: bool
    cwd: Path
    program_dir: Path
    override: Optional[Path] = None


@dataclass(frozen=True)
class BuildRoot:
    """The directory the SPA bundle is served from. Resolved once at startup."""

    path: Path
    found: bool

    @property
    def index(self) -> Path:
        return self.path / "index.html"


def candidate_paths(signals: EnvironmentSignals) -> tuple[Path, ...]:
    """Ordered build directory candidates for the given environment."""
    if signals.override is not None:
        return (signals.override.absolute(),)

    # program_dir is backend/lptagger, so the repository root is two levels up
    repo_root = signals.program_dir.parent.parent
    if signals.is_development:
        candidates = [repo_root / DIST_SUBDIR]
    elif signals.is_deployed:
        candidates = [
            signals.program_dir / PUBLIC_SUBDIR,
            signals.program_dir.parent / PUBLIC_SUBDIR,
            signals.cwd / DIST_SUBDIR,
            signals.cwd / PUBLIC_SUBDIR,
        ]
    else:
        candidates = [signals.cwd / DIST_SUBDIR, repo_root / DIST_SUBDIR]
    return tuple(Path(os.path.abspath(c)) for c in candidates)


def select_build_root(
    candidates: Iterable[Path],
    exists: Callable[[Path], bool] = os.path.isdir,
) -> BuildRoot:
    """Pick the first candidate that exists, or default to the first one.

    Stops checking at the first hit. Raises ValueError only for an empty
    candidate list, which ``candidate_paths`` never produces.
    """
    first: Optional[Path] = None
    for candidate in candidates:
        if first is None:
            first = candidate
        if exists(candidate):
            return BuildRoot(path=candidate, found=True)
    if first is None:
        raise ValueError("No build directory candidates given")
    return BuildRoot(path=first, found=False)


def _sample_contents(path: Path) -> list[str]:
    try:
        return sorted(os.listdir(path))[:SAMPLE_SIZE]
    except OSError as e:
        logger.warning(f"Could not list build directory {path}: {e}")
        return []


def locate(
    signals: EnvironmentSignals,
    exists: Callable[[Path], bool] = os.path.isdir,
) -> BuildRoot:
    """Resolve the build root for this process and log what was chosen."""
    candidates = candidate_paths(signals)
    build_root = select_build_root(candidates, exists)

    if build_root.found:
        logger.info(f"Serving front-end build from {build_root.path}")
        logger.info(f"Build directory contents: {_sample_contents(build_root.path)}")
    else:
        logger.warning(
            f"Could not find the build directory (tried: "
            f"{', '.join(str(c) for c in candidates)}); "
            f"defaulting to {build_root.path}. Build the client first."
        )
    return build_root
