"""Boundary to the mapping engine that turns a mapping graph into statements."""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Callable, Iterable, Iterator, List, Optional

from .errors import EngineError
from .loader import MappingGraph
from .utils.terms import Statement

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "rml_runner.engines"

MappingEngine = Callable[[MappingGraph, "MapperConfig"], Iterable[Statement]]


@dataclass
class MapperConfig:
    functions: List[Any] = field(default_factory=list)
    relative_source_location: Optional[Path] = None
    input_stream: Optional[BinaryIO] = None


def _entry_point(name: str):
    for entry_point in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        if entry_point.name == name:
            return entry_point
    return None


def load_engine(reference: str) -> MappingEngine:
    """Resolve an engine from ``module:attribute`` or a registered entry-point name."""

    if ":" not in reference:
        entry_point = _entry_point(reference)
        if entry_point is None:
            raise EngineError(
                f"Unknown mapping engine '{reference}'. Use 'module:attribute' or an entry point "
                f"registered under '{ENTRY_POINT_GROUP}'."
            )
        try:
            engine = entry_point.load()
        except ImportError as exc:
            raise EngineError(f"Could not load mapping engine '{reference}': {exc}") from exc
    else:
        module_name, _, attribute = reference.partition(":")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise EngineError(f"Could not import mapping engine module '{module_name}': {exc}") from exc
        engine = module
        for part in attribute.split("."):
            try:
                engine = getattr(engine, part)
            except AttributeError as exc:
                raise EngineError(f"Module '{module_name}' has no attribute '{attribute}'") from exc

    if not callable(engine):
        raise EngineError(f"Mapping engine '{reference}' is not callable")
    return engine


def generate_statements(
    engine: MappingEngine,
    mapping: MappingGraph,
    config: MapperConfig | None = None,
) -> Iterator[Statement]:
    """Run ``engine`` and return its statements as a lazy iterator."""

    produced = engine(mapping, config or MapperConfig())
    try:
        return iter(produced)
    except TypeError as exc:
        raise EngineError(f"Mapping engine returned {type(produced).__name__}, expected an iterable") from exc
