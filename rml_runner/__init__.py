"""Load RML mapping definitions and serialize the statements they produce."""

from __future__ import annotations

__version__ = "0.1.0"

from .formats import FORMATS, FormatDescriptor, resolve_by_filename, resolve_by_token
from .loader import MappingGraph, load_all, load_mapping
from .output import OutputSink, serialize, write

__all__ = [
    "__version__",
    "FORMATS",
    "FormatDescriptor",
    "MappingGraph",
    "OutputSink",
    "load_all",
    "load_mapping",
    "resolve_by_filename",
    "resolve_by_token",
    "serialize",
    "write",
]
