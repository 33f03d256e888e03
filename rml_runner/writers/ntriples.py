"""Line-oriented N-Triples and N-Quads writers."""

from __future__ import annotations

from ..utils.terms import Statement, render_nt, split_statement
from .base import StreamWriter


class NTriplesWriter(StreamWriter):
    """Write one ``s p o .`` line per statement; graph names are dropped."""

    def handle_statement(self, statement: Statement) -> None:
        subject, predicate, obj, _ = split_statement(statement)
        self._emit(f"{render_nt(subject)} {render_nt(predicate)} {render_nt(obj)} .\n")
        self.statement_count += 1


class NQuadsWriter(StreamWriter):
    """Write one ``s p o [g] .`` line per statement."""

    def handle_statement(self, statement: Statement) -> None:
        subject, predicate, obj, graph = split_statement(statement)
        line = f"{render_nt(subject)} {render_nt(predicate)} {render_nt(obj)}"
        if graph is not None:
            line = f"{line} {render_nt(graph)}"
        self._emit(line + " .\n")
        self.statement_count += 1
