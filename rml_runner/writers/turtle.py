"""Block-oriented Turtle and TriG writers.

Consecutive statements sharing a subject are joined with ``;`` and those
sharing subject and predicate with ``,``. Only the previous subject, predicate
and graph name are retained between calls.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Dict

from ..utils.terms import Statement, encode_iri, is_valid_prefix, render_turtle, split_statement
from .base import StreamWriter

logger = logging.getLogger(__name__)


class TurtleWriter(StreamWriter):
    def __init__(self, stream: BinaryIO) -> None:
        super().__init__(stream)
        # namespace IRI -> prefix label
        self._prefixes: Dict[str, str] = {}
        self._subject = None
        self._predicate = None
        self._blank_line = False

    def handle_namespace(self, prefix: str, name: str) -> None:
        if not is_valid_prefix(prefix):
            logger.debug("Skipping namespace with invalid Turtle prefix %r", prefix)
            return
        self._close_open_blocks()
        for namespace, existing in list(self._prefixes.items()):
            if existing == prefix:
                del self._prefixes[namespace]
        self._prefixes[str(name)] = prefix
        self._emit(f"@prefix {prefix}: {encode_iri(str(name))} .\n")
        self._blank_line = True

    def handle_statement(self, statement: Statement) -> None:
        subject, predicate, obj, graph = split_statement(statement)
        self._emit(self._render(subject, predicate, obj, graph))
        self.statement_count += 1

    def end_document(self) -> None:
        self._close_open_blocks()

    def _render(self, subject, predicate, obj, graph) -> str:
        return self._render_triple(subject, predicate, obj, indent="")

    def _render_triple(self, subject, predicate, obj, indent: str) -> str:
        rendered_object = render_turtle(obj, self._prefixes)
        if self._subject is not None and subject == self._subject:
            if predicate == self._predicate:
                return f" ,\n{indent}        {rendered_object}"
            self._predicate = predicate
            rendered_predicate = render_turtle(predicate, self._prefixes, predicate=True)
            return f" ;\n{indent}    {rendered_predicate} {rendered_object}"

        text = " .\n" if self._subject is not None else ""
        text += self._take_blank_line()
        self._subject, self._predicate = subject, predicate
        return (
            f"{text}{indent}{render_turtle(subject, self._prefixes)} "
            f"{render_turtle(predicate, self._prefixes, predicate=True)} {rendered_object}"
        )

    def _take_blank_line(self) -> str:
        if self._blank_line:
            self._blank_line = False
            return "\n"
        return ""

    def _close_open_blocks(self) -> None:
        if self._subject is not None:
            self._emit(" .\n")
        self._subject = self._predicate = None


class TriGWriter(TurtleWriter):
    """Turtle writer that wraps named-graph statements in ``<g> { ... }`` blocks."""

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__(stream)
        self._graph = None

    def _render(self, subject, predicate, obj, graph) -> str:
        text = ""
        if graph != self._graph:
            if self._subject is not None:
                text += " .\n"
            if self._graph is not None:
                text += "}\n"
            self._subject = self._predicate = None
            self._graph = graph
            if graph is not None:
                text += f"{self._take_blank_line()}{render_turtle(graph, self._prefixes)} {{\n"
        indent = "    " if self._graph is not None else ""
        return text + self._render_triple(subject, predicate, obj, indent=indent)

    def _close_open_blocks(self) -> None:
        super()._close_open_blocks()
        if self._graph is not None:
            self._emit("}\n")
        self._graph = None
