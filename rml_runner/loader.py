"""Aggregate mapping files of mixed RDF formats into one graph."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from rdflib import Dataset, Graph

from .errors import MappingFormatError, MappingParseError, RunnerError
from .formats import FormatDescriptor, require_format, resolve_by_filename
from .paths import resolve_paths
from .utils.terms import Quad, graph_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedFile:
    path: Path
    format: Optional[FormatDescriptor]


@dataclass
class Loaded:
    file: ResolvedFile
    statements: List[Quad]
    namespaces: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class Skipped:
    file: ResolvedFile
    reason: str


@dataclass
class Failed:
    file: ResolvedFile
    error: RunnerError


FileOutcome = Union[Loaded, Skipped, Failed]


class MappingGraph:
    """Merged mapping statements plus the namespace bindings of their files.

    Statements are kept in an ``rdflib.Dataset`` so quads from context-aware
    formats keep their graph names; triples land in the default graph.
    """

    def __init__(self) -> None:
        self.dataset = Dataset()
        self.skipped: List[Skipped] = []
        self.sources: List[Path] = []

    def add(self, statement: Quad) -> None:
        subject, predicate, obj, graph = statement
        self.dataset.add((subject, predicate, obj, graph_name(graph)))

    def bind(self, prefix: str, namespace: str) -> None:
        self.dataset.bind(prefix, namespace, override=True, replace=True)

    def merge(self, outcome: Loaded) -> None:
        for statement in outcome.statements:
            self.add(statement)
        for prefix, namespace in outcome.namespaces:
            self.bind(prefix, namespace)
        self.sources.append(outcome.file.path)

    def statements(self) -> Iterator[Quad]:
        for subject, predicate, obj, graph in self.dataset.quads((None, None, None, None)):
            yield subject, predicate, obj, graph_name(graph)

    def namespaces(self) -> List[Tuple[str, str]]:
        return [(prefix, str(namespace)) for prefix, namespace in self.dataset.namespaces()]

    def to_graph(self) -> Graph:
        """Return the union of all statements as a plain triple graph."""

        graph = Graph()
        for prefix, namespace in self.namespaces():
            graph.bind(prefix, namespace, override=True, replace=True)
        for subject, predicate, obj, _ in self.statements():
            graph.add((subject, predicate, obj))
        return graph

    def serialize(self, format: str = "turtle", namespaces: Iterable[Tuple[str, str]] = ()) -> str:
        """Render the triples union as text, with ``namespaces`` bound on top of the files' own."""

        graph = self.to_graph()
        for prefix, namespace in namespaces:
            graph.bind(prefix, namespace, override=True, replace=True)
        return graph.serialize(format=format)

    def __len__(self) -> int:
        return sum(1 for _ in self.statements())

    def __contains__(self, statement) -> bool:
        if len(statement) == 3:
            return any(True for _ in self.dataset.quads((*statement, None)))
        subject, predicate, obj, graph = statement
        return any(graph_name(g) == graph_name(graph) for *_, g in self.dataset.quads((subject, predicate, obj, None)))

    def __iter__(self) -> Iterator[Quad]:
        return self.statements()


def load_file(resolved: ResolvedFile) -> FileOutcome:
    """Parse a single file; never raises for file-level problems."""

    descriptor = resolved.format
    if descriptor is None:
        return Skipped(resolved, f"Could not determine mapping format for filename '{resolved.path.name}'")
    if descriptor.parser is None:
        return Failed(resolved, MappingFormatError(f"No parser available for {descriptor} file {resolved.path}"))

    target = Dataset() if descriptor.context_aware else Graph()
    try:
        target.parse(source=str(resolved.path), format=descriptor.parser)
    except Exception as exc:
        error = MappingParseError(resolved.path, descriptor.label)
        error.__cause__ = exc
        return Failed(resolved, error)

    if descriptor.context_aware:
        statements = [
            (s, p, o, graph_name(g)) for s, p, o, g in target.quads((None, None, None, None))
        ]
    else:
        statements = [(s, p, o, None) for s, p, o in target]
    namespaces = [(prefix, str(namespace)) for prefix, namespace in target.namespaces()]
    return Loaded(resolved, statements, namespaces)


def load_all(
    paths: Iterable[str | Path],
    format_override: FormatDescriptor | None = None,
    workers: int = 1,
) -> MappingGraph:
    """Load and merge every mapping file named by, or found beneath, ``paths``.

    With ``format_override`` every file is parsed as that format. Without it the
    format is inferred per file name and files with an unknown extension are
    skipped with a warning. Any parse failure aborts the load; the first failure
    in resolved order is raised.
    """

    files = [
        ResolvedFile(path, format_override or resolve_by_filename(path.name))
        for path in resolve_paths(paths)
    ]

    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(load_file, files))
    else:
        outcomes = [load_file(resolved) for resolved in files]

    return _fold(outcomes)


def _fold(outcomes: List[FileOutcome]) -> MappingGraph:
    for outcome in outcomes:
        if isinstance(outcome, Failed):
            raise outcome.error

    graph = MappingGraph()
    for outcome in outcomes:
        if isinstance(outcome, Skipped):
            logger.warning("%s, ignoring this file...", outcome.reason)
            graph.skipped.append(outcome)
        else:
            logger.debug("Merging %d statement(s) from %s", len(outcome.statements), outcome.file.path)
            graph.merge(outcome)

    logger.info(
        "Loaded %d mapping statement(s) from %d file(s), skipped %d file(s)",
        len(graph),
        len(graph.sources),
        len(graph.skipped),
    )
    return graph


def load_mapping(
    paths: Iterable[str | Path],
    format_token: str | None = None,
    workers: int = 1,
) -> MappingGraph:
    paths = [Path(p) for p in paths]
    logger.info("Loading mapping from %s ...", [str(p) for p in paths])
    format_override = require_format(format_token) if format_token else None
    return load_all(paths, format_override=format_override, workers=workers)
