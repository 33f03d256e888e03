"""Namespace declarations read from JSON-LD context documents."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from .errors import ContextError

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_RESOURCE = "default_context.jsonld"


class NamespaceDeclaration(NamedTuple):
    prefix: str
    name: str


def _read_default_context() -> str:
    return resources.files("rml_runner").joinpath("data").joinpath(DEFAULT_CONTEXT_RESOURCE).read_text(encoding="utf-8")


def load_context(path: str | Path | None = None) -> Dict[str, str]:
    """Return the prefix -> namespace entries of a JSON-LD ``@context``.

    Without ``path`` the bundled default context is used. Term definitions
    that are not plain IRIs (objects, keywords) are ignored.
    """

    source = str(path) if path is not None else DEFAULT_CONTEXT_RESOURCE
    try:
        text = Path(path).read_text(encoding="utf-8") if path is not None else _read_default_context()
        document = json.loads(text)
    except OSError as exc:
        raise ContextError(f"Could not read context file {source}") from exc
    except json.JSONDecodeError as exc:
        raise ContextError(f"Context file {source} is not valid JSON: {exc}") from exc

    context = document.get("@context") if isinstance(document, dict) else None
    if not isinstance(context, dict):
        raise ContextError(f"Context file {source} has no @context object")

    return {
        prefix: value
        for prefix, value in context.items()
        if isinstance(value, str) and not prefix.startswith("@")
    }


def namespaces_for_prefixes(
    prefixes: Sequence[str] = (),
    context_path: str | Path | None = None,
) -> List[NamespaceDeclaration]:
    """Select namespaces from a context; an empty selection returns all of them."""

    context = load_context(context_path)
    if not prefixes:
        return [NamespaceDeclaration(prefix, name) for prefix, name in sorted(context.items())]

    selected = []
    for prefix in prefixes:
        name = context.get(prefix)
        if name is None:
            logger.warning("Prefix '%s' is not declared in the namespace context, ignoring it", prefix)
            continue
        selected.append(NamespaceDeclaration(prefix, name))
    return selected


def namespaces_from_context_file(path: str | Path) -> List[NamespaceDeclaration]:
    return namespaces_for_prefixes((), context_path=path)


def merge_namespaces(*groups: Iterable[NamespaceDeclaration]) -> List[NamespaceDeclaration]:
    """Merge declaration groups into a prefix-unique list; later groups win."""

    merged: Dict[str, str] = {}
    for group in groups:
        for declaration in group:
            merged[declaration.prefix] = declaration.name
    return [NamespaceDeclaration(prefix, name) for prefix, name in sorted(merged.items())]


def output_namespaces(
    prefixes: Optional[Sequence[str]] = None,
    context_path: str | Path | None = None,
) -> List[NamespaceDeclaration]:
    """Namespaces to declare on output.

    ``prefixes`` (when given, possibly empty) are selected from the default
    context; every declaration of ``context_path`` is added afterwards and wins
    on a shared prefix.
    """

    groups = []
    if prefixes is not None:
        groups.append(namespaces_for_prefixes(prefixes))
    if context_path is not None:
        groups.append(namespaces_from_context_file(context_path))
    return merge_namespaces(*groups)
