"""High-level API: load a mapping, run the engine and write its output."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional

from .config import RunnerConfig
from .context import NamespaceDeclaration, output_namespaces
from .engine import MapperConfig, MappingEngine, generate_statements, load_engine
from .errors import EngineError, MappingError, RunnerError
from .formats import DEFAULT_OUTPUT_FORMAT, FormatDescriptor, require_format
from .functions import load_functions
from .loader import MappingGraph, load_mapping
from .output import OutputSink, check_writable, serialize

logger = logging.getLogger(__name__)


def _output_format(config: RunnerConfig) -> FormatDescriptor:
    if config.output_format:
        output_format = require_format(config.output_format)
    else:
        logger.info("Defaulting to %s format ...", DEFAULT_OUTPUT_FORMAT.label)
        output_format = DEFAULT_OUTPUT_FORMAT
    check_writable(output_format)
    return output_format


def _resolve_engine(config: RunnerConfig, engine: MappingEngine | None) -> MappingEngine:
    if engine is not None:
        return engine
    if not config.engine:
        raise EngineError("No mapping engine configured. Use --engine or RML_RUNNER_ENGINE.")
    return load_engine(config.engine)


def _log_mapping(mapping: MappingGraph, namespaces: List[NamespaceDeclaration]) -> None:
    logger.debug("The following mapping constructs were detected:")
    logger.debug("%s", mapping.serialize("turtle", namespaces))


def _mapper_config(config: RunnerConfig) -> MapperConfig:
    mapper_config = MapperConfig()
    if config.functions and config.function_archives:
        logger.debug("Loading transformation functions ...")
        mapper_config.functions = load_functions(config.functions, config.function_archives)
    elif config.functions or config.function_archives:
        logger.warning("Transformation functions need both function classes and archives, ignoring them")
    if config.relative_source_location:
        mapper_config.relative_source_location = Path(config.relative_source_location)
    return mapper_config


@contextmanager
def _bound_input(input_path: Optional[str]) -> Iterator[Optional[BinaryIO]]:
    if input_path is None:
        yield None
        return
    try:
        stream = Path(input_path).open("rb")
    except OSError as exc:
        raise RunnerError(f"Could not read input file {input_path}") from exc
    try:
        yield stream
    finally:
        stream.close()


def run(config: RunnerConfig, engine: MappingEngine | None = None) -> int:
    """Execute a full mapping run described by ``config``.

    Format tokens, the engine and namespace contexts are validated before any
    mapping file is read. Returns the number of statements written.
    """

    if not config.mapping_paths:
        raise MappingError("No mapping file paths given")
    output_format = _output_format(config)
    if config.mapping_format:
        require_format(config.mapping_format)
    engine = _resolve_engine(config, engine)
    namespaces = output_namespaces(config.prefixes, config.context_path)

    mapping = load_mapping(config.mapping_paths, config.mapping_format, workers=config.workers)
    if logger.isEnabledFor(logging.DEBUG):
        _log_mapping(mapping, namespaces)

    mapper_config = _mapper_config(config)
    sink = OutputSink.file(config.output_path) if config.output_path else OutputSink.console()
    if config.output_path is None:
        logger.info("No output file specified. Outputting to console...")

    logger.info("Executing mapping ...")
    started = time.perf_counter()
    with _bound_input(config.input_path) as input_stream:
        mapper_config.input_stream = input_stream
        statements = generate_statements(engine, mapping, mapper_config)
        count = serialize(statements, output_format, namespaces, sink=sink, pretty=config.pretty)
    elapsed = time.perf_counter() - started

    logger.info("Finished processing.")
    logger.info("Processing took: %.3f seconds, %d statement(s) written", elapsed, count)
    return count
