"""Static table of RDF serialization formats.

Each row names the rdflib parser and serializer plugins for a format and
whether it can be written one statement at a time. Adding a format means
adding a row; the loader and the output pipeline only read the table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Dict, Optional, Tuple, Type

from .errors import MappingFormatError
from .writers import NQuadsWriter, NTriplesWriter, StreamWriter, TriGWriter, TurtleWriter


@dataclass(frozen=True)
class FormatDescriptor:
    token: str
    label: str
    mime_type: str
    extensions: Tuple[str, ...]
    streaming: bool = False
    context_aware: bool = False
    parser: Optional[str] = None
    serializer: Optional[str] = None
    pretty_serializer: Optional[str] = None
    serializer_options: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    stream_writer: Optional[Type[StreamWriter]] = None
    prettifiable: bool = True

    @property
    def buffered_serializer(self) -> Optional[str]:
        return self.pretty_serializer or self.serializer

    def __str__(self) -> str:
        return f"{self.label} ({self.mime_type})"


TURTLE = FormatDescriptor(
    token="ttl",
    label="Turtle",
    mime_type="text/turtle",
    extensions=("ttl",),
    streaming=True,
    parser="turtle",
    serializer="turtle",
    stream_writer=TurtleWriter,
)
NTRIPLES = FormatDescriptor(
    token="nt",
    label="N-Triples",
    mime_type="application/n-triples",
    extensions=("nt",),
    streaming=True,
    parser="nt",
    serializer="nt",
    stream_writer=NTriplesWriter,
    prettifiable=False,
)
NQUADS = FormatDescriptor(
    token="nq",
    label="N-Quads",
    mime_type="application/n-quads",
    extensions=("nq",),
    streaming=True,
    context_aware=True,
    parser="nquads",
    serializer="nquads",
    stream_writer=NQuadsWriter,
    prettifiable=False,
)
RDFXML = FormatDescriptor(
    token="rdf",
    label="RDF/XML",
    mime_type="application/rdf+xml",
    extensions=("rdf", "rdfs", "owl", "xml"),
    parser="xml",
    serializer="xml",
    pretty_serializer="pretty-xml",
)
JSONLD = FormatDescriptor(
    token="jsonld",
    label="JSON-LD",
    mime_type="application/ld+json",
    extensions=("jsonld",),
    context_aware=True,
    parser="json-ld",
    serializer="json-ld",
    serializer_options={"indent": 2},
)
TRIG = FormatDescriptor(
    token="trig",
    label="TriG",
    mime_type="application/trig",
    extensions=("trig",),
    streaming=True,
    context_aware=True,
    parser="trig",
    serializer="trig",
    stream_writer=TriGWriter,
)
N3 = FormatDescriptor(
    token="n3",
    label="N3",
    mime_type="text/n3",
    extensions=("n3",),
    parser="n3",
    serializer="n3",
)
TRIX = FormatDescriptor(
    token="trix",
    label="TriX",
    mime_type="application/trix",
    extensions=("xml", "trix"),
    context_aware=True,
    parser="trix",
    serializer="trix",
)
BINARY = FormatDescriptor(
    token="brf",
    label="BinaryRDF",
    mime_type="application/x-binary-rdf",
    extensions=("brf",),
    context_aware=True,
)
RDFJSON = FormatDescriptor(
    token="rj",
    label="RDF/JSON",
    mime_type="application/rdf+json",
    extensions=("rj",),
)

FORMATS: Tuple[FormatDescriptor, ...] = (
    TURTLE,
    NTRIPLES,
    NQUADS,
    RDFXML,
    JSONLD,
    TRIG,
    N3,
    TRIX,
    BINARY,
    RDFJSON,
)

DEFAULT_OUTPUT_FORMAT = NQUADS


def resolve_by_token(token: str) -> Optional[FormatDescriptor]:
    """Find a format by its default extension or MIME type."""

    wanted = token.strip().lower().lstrip(".")
    for descriptor in FORMATS:
        if descriptor.token == wanted:
            return descriptor
    for descriptor in FORMATS:
        if descriptor.mime_type == wanted:
            return descriptor
    return None


def resolve_by_filename(name: str | PurePath) -> Optional[FormatDescriptor]:
    """Infer a format from a file name's suffix; the first matching row wins."""

    suffix = PurePath(name).suffix.lower().lstrip(".")
    if not suffix:
        return None
    for descriptor in FORMATS:
        if suffix in descriptor.extensions:
            return descriptor
    return None


def require_format(token: str) -> FormatDescriptor:
    descriptor = resolve_by_token(token)
    if descriptor is None:
        known = ", ".join(f.token for f in FORMATS)
        raise MappingFormatError(f"Unrecognized RDF format '{token}' specified. Known formats: {known}")
    return descriptor


def is_streaming_capable(descriptor: FormatDescriptor) -> bool:
    return descriptor.streaming


def use_streaming(descriptor: FormatDescriptor, pretty: bool = False) -> bool:
    """Return True when output in ``descriptor`` should be written incrementally.

    A pretty-print request only forces buffering for formats whose pretty
    layout needs the whole document.
    """

    return is_streaming_capable(descriptor) and not (pretty and descriptor.prettifiable)
