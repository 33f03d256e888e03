"""Serialize produced statements to a console or file sink."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional

from rdflib import Dataset, Graph
from rdflib.plugin import PluginException

from .context import NamespaceDeclaration
from .errors import MappingFormatError, SerializationError
from .formats import FormatDescriptor, use_streaming
from .utils.terms import Statement, split_statement

logger = logging.getLogger(__name__)

WRITE_ERRORS = (OSError, ValueError, TypeError, PluginException)


class OutputSink:
    """A binary destination owned by one serialization call.

    ``acquire`` yields the underlying stream and releases it on every exit
    path: owned streams are closed, borrowed ones (the console) are flushed.
    """

    def __init__(
        self,
        stream: BinaryIO | None = None,
        path: str | Path | None = None,
        close_on_release: bool = True,
    ) -> None:
        if (stream is None) == (path is None):
            raise ValueError("OutputSink needs exactly one of stream or path")
        self.stream = stream
        self.path = Path(path) if path is not None else None
        self.close_on_release = close_on_release
        self.released = False

    @classmethod
    def console(cls) -> "OutputSink":
        return cls(stream=sys.stdout.buffer, close_on_release=False)

    @classmethod
    def file(cls, path: str | Path) -> "OutputSink":
        return cls(path=path)

    def describe(self) -> str:
        return str(self.path) if self.path is not None else "console"

    @contextmanager
    def acquire(self) -> Iterator[BinaryIO]:
        if self.path is not None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                stream = self.path.open("wb")
            except OSError as exc:
                raise SerializationError(f"Could not open output file {self.path}") from exc
        else:
            stream = self.stream
        self.released = False
        try:
            yield stream
        finally:
            self._release(stream)

    def _release(self, stream: BinaryIO) -> None:
        try:
            if self.close_on_release:
                stream.close()
            else:
                stream.flush()
        finally:
            self.released = True


def write(
    statements: Iterable[Statement],
    output_format: FormatDescriptor,
    namespaces: Iterable[NamespaceDeclaration] = (),
    pretty: bool = False,
    sink: OutputSink | None = None,
) -> int:
    """Write ``statements`` to ``sink`` in ``output_format``.

    Streaming-capable formats are written one statement at a time as the
    producer yields them; other formats are drained into an in-memory graph and
    written as one pretty-printed document. The upstream iterator is closed and
    the sink released on every exit path. Returns the number of statements
    consumed.
    """

    sink = sink or OutputSink.console()
    namespaces = list(namespaces)
    iterator = iter(statements)
    try:
        with sink.acquire() as stream:
            if use_streaming(output_format, pretty):
                return _write_streaming(iterator, output_format, namespaces, stream)
            return _write_buffered(iterator, output_format, namespaces, stream)
    finally:
        _cancel(iterator)


def serialize(
    statements: Iterable[Statement],
    output_format: FormatDescriptor,
    namespaces: Iterable[NamespaceDeclaration] = (),
    sink: OutputSink | None = None,
    pretty: bool = False,
) -> int:
    check_writable(output_format)
    sink = sink or OutputSink.console()
    logger.info("Writing %s output to %s ...", output_format.label, sink.describe())
    return write(statements, output_format, namespaces, pretty=pretty, sink=sink)


def check_writable(output_format: FormatDescriptor) -> None:
    if output_format.stream_writer is None and output_format.buffered_serializer is None:
        raise MappingFormatError(f"No writer available for output format {output_format}")


def _write_streaming(
    iterator: Iterator[Statement],
    output_format: FormatDescriptor,
    namespaces: list,
    stream: BinaryIO,
) -> int:
    writer = output_format.stream_writer(stream)
    try:
        writer.start_document()
        for declaration in namespaces:
            writer.handle_namespace(declaration.prefix, declaration.name)
    except WRITE_ERRORS as exc:
        raise SerializationError("Exception occurred while writing output.") from exc

    # Pulling the next statement happens outside the try block: producer
    # errors propagate as they are.
    for statement in iterator:
        try:
            writer.handle_statement(statement)
        except WRITE_ERRORS as exc:
            raise SerializationError(
                f"Exception occurred while writing statement {writer.statement_count + 1}."
            ) from exc

    try:
        writer.end_document()
    except WRITE_ERRORS as exc:
        raise SerializationError("Exception occurred while writing output.") from exc
    return writer.statement_count


def _write_buffered(
    iterator: Iterator[Statement],
    output_format: FormatDescriptor,
    namespaces: list,
    stream: BinaryIO,
) -> int:
    graph = Dataset() if output_format.context_aware else Graph()
    count = 0
    for statement in iterator:
        try:
            subject, predicate, obj, graph_name = split_statement(statement)
            if output_format.context_aware:
                graph.add((subject, predicate, obj, graph_name))
            else:
                graph.add((subject, predicate, obj))
        except (*WRITE_ERRORS, AssertionError) as exc:
            raise SerializationError(f"Exception occurred while buffering statement {count + 1}.") from exc
        count += 1

    for declaration in namespaces:
        graph.bind(declaration.prefix, declaration.name, override=True, replace=True)

    try:
        graph.serialize(
            destination=stream,
            format=output_format.buffered_serializer,
            encoding="utf-8",
            **output_format.serializer_options,
        )
    except WRITE_ERRORS as exc:
        raise SerializationError(f"Exception occurred while writing {output_format.label} output.") from exc
    return count


def _cancel(iterator: Iterator[Statement]) -> None:
    close = getattr(iterator, "close", None)
    if close is not None:
        close()
