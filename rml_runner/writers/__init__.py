"""Forward-only writers used by the streaming output strategy."""

from .base import StreamWriter
from .ntriples import NQuadsWriter, NTriplesWriter
from .turtle import TriGWriter, TurtleWriter

__all__ = ["NQuadsWriter", "NTriplesWriter", "StreamWriter", "TriGWriter", "TurtleWriter"]
