"""Forward-only writer interface for streaming serialization."""

from __future__ import annotations

from typing import BinaryIO

from ..utils.terms import Statement


class StreamWriter:
    """Base class for writers that emit one statement at a time.

    A writer is bound to a binary stream and driven through
    ``start_document`` / ``handle_namespace`` / ``handle_statement`` /
    ``end_document``. Implementations keep only what they need to join the
    next statement to the previous one, never the statement set.
    """

    encoding = "utf-8"

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self.statement_count = 0

    def start_document(self) -> None:
        pass

    def handle_namespace(self, prefix: str, name: str) -> None:
        pass

    def handle_statement(self, statement: Statement) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    def end_document(self) -> None:
        pass

    def _emit(self, text: str) -> None:
        self.stream.write(text.encode(self.encoding))
