"""Expand mapping paths into the regular files beneath them."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List

from .errors import PathResolutionError

logger = logging.getLogger(__name__)


def resolve_paths(paths: Iterable[str | Path]) -> List[Path]:
    """Return every regular file named by, or found beneath, ``paths``.

    Results follow input order. Directories are walked recursively with entries
    sorted by name, so the order is stable across file systems. A path that
    does not exist or cannot be read fails the whole resolution.
    """

    resolved: List[Path] = []
    for raw in paths:
        path = Path(raw).absolute()
        if path.is_file():
            if not os.access(path, os.R_OK):
                raise PathResolutionError(path, f"Mapping file {path} is not readable")
            resolved.append(path)
        elif path.is_dir():
            resolved.extend(_walk(path))
        else:
            raise PathResolutionError(path, f"Mapping path {path} does not exist")
    return resolved


def _walk(root: Path) -> List[Path]:
    def _raise(exc: OSError) -> None:
        raise PathResolutionError(exc.filename or root, f"Exception occurred while reading {exc.filename or root}") from exc

    files: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            candidate = Path(dirpath) / name
            if not candidate.is_file():
                continue
            if not os.access(candidate, os.R_OK):
                raise PathResolutionError(candidate, f"Mapping file {candidate} is not readable")
            files.append(candidate)
    logger.debug("Resolved %d file(s) under %s", len(files), root)
    return files
