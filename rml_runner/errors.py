"""Exception hierarchy for rml-runner."""

from __future__ import annotations

from pathlib import Path


class RunnerError(Exception):
    """Base class for every failure reported by the runner."""


class MappingError(RunnerError):
    """The mapping could not be prepared for execution."""


class MappingFormatError(RunnerError):
    """An RDF format token is unknown or cannot be used for the requested direction."""


class PathResolutionError(RunnerError):
    """A mapping path does not exist or cannot be read."""

    def __init__(self, path: str | Path, message: str | None = None) -> None:
        self.path = Path(path)
        super().__init__(message or f"Could not read mapping path {self.path}")


class MappingParseError(RunnerError):
    """A file with a recognised RDF format failed to parse as that format."""

    def __init__(self, path: str | Path, format_label: str) -> None:
        self.path = Path(path)
        self.format_label = format_label
        super().__init__(f"Could not parse {self.path} as {format_label}")


class SerializationError(RunnerError):
    """Writing statements to the output sink failed."""


class ContextError(RunnerError):
    """A JSON-LD namespace context could not be loaded."""


class ConfigError(RunnerError):
    """A configuration file is missing or malformed."""


class EngineError(RunnerError):
    """The mapping engine could not be resolved or did not produce statements."""


class FunctionLoadError(RunnerError):
    """Transformation functions could not be loaded."""
