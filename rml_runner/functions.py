"""Load user-supplied transformation function classes from archives."""

from __future__ import annotations

import importlib
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Sequence

from .errors import FunctionLoadError

logger = logging.getLogger(__name__)


@contextmanager
def _importable(archives: Sequence[Path]) -> Iterator[None]:
    """Make directories, zip and wheel archives importable for the duration of the block."""

    entries = [str(archive) for archive in archives]
    sys.path[:0] = entries
    importlib.invalidate_caches()
    try:
        yield
    finally:
        for entry in entries:
            if entry in sys.path:
                sys.path.remove(entry)


def _split_class_name(name: str) -> tuple[str, str]:
    if ":" in name:
        module_name, _, class_name = name.partition(":")
    else:
        module_name, _, class_name = name.rpartition(".")
    if not module_name or not class_name:
        raise FunctionLoadError(f"Function class '{name}' must be given as 'module:Class' or 'module.Class'")
    return module_name, class_name


def load_functions(class_names: Iterable[str], archives: Iterable[str | Path]) -> List[Any]:
    """Instantiate each of ``class_names`` found in ``archives``.

    Classes are instantiated without arguments, one instance per name.
    """

    archive_paths = [Path(archive).absolute() for archive in archives]
    for archive in archive_paths:
        if not archive.exists():
            raise FunctionLoadError(f"Could not find function archive {archive}")

    functions: List[Any] = []
    with _importable(archive_paths):
        for name in dict.fromkeys(class_names):
            module_name, class_name = _split_class_name(name)
            try:
                module = importlib.import_module(module_name)
                cls = getattr(module, class_name)
            except (ImportError, AttributeError) as exc:
                raise FunctionLoadError(f"Could not load function class '{name}': {exc}") from exc
            try:
                functions.append(cls())
            except Exception as exc:
                raise FunctionLoadError(f"Could not instantiate function class '{name}': {exc}") from exc
            logger.debug("Loaded transformation functions from %s", name)
    return functions
