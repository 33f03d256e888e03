# rml_runner/cli.py

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional

from . import __version__
from .config import RunnerConfig, load_config_file
from .errors import RunnerError
from .formats import FORMATS
from .runner import run

FORMAT_HELP = ", ".join(f"{f.token} ({f.mime_type})" for f in FORMATS)


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="rml-runner",
        description="Execute RML mappings and write the produced RDF.",
    )

    parser.add_argument(
        "-m",
        "--mapping",
        nargs="+",
        default=None,
        help="Mapping file path(s) and/or mapping file directory path(s).",
    )
    parser.add_argument(
        "-f",
        "--format",
        type=str,
        default=None,
        help=f"Mapping file RDF format: {FORMAT_HELP}. "
             "If not set, the format is inferred per file and unknown files are skipped.",
    )
    parser.add_argument(
        "--rel-src-loc",
        type=str,
        default=None,
        help="Directory used to find relative logical sources in mapping files.",
    )
    parser.add_argument(
        "-i",
        "--input",
        type=str,
        default=None,
        help="Input file path, bound as the source of logical sources that expect a stream.",
    )
    parser.add_argument(
        "-j",
        "--function-archives",
        nargs="+",
        default=None,
        help="Directories, zip or wheel archives containing transformation functions.",
    )
    parser.add_argument(
        "--functions",
        nargs="+",
        default=None,
        help="Transformation function classes (module:Class) from --function-archives.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output file path. If not set, output is written to the console.",
    )
    parser.add_argument(
        "--outformat",
        type=str,
        default=None,
        help="Output RDF format (see --format). Default: RML_RUNNER_OUTPUT_FORMAT or nq.",
    )
    parser.add_argument(
        "-p",
        "--prefix",
        nargs="*",
        default=None,
        help="Namespace prefixes to declare on output, selected from the default context. "
             "Without values every prefix of the default context is declared.",
    )
    parser.add_argument(
        "-c",
        "--context",
        type=str,
        default=None,
        help="JSON-LD context file containing namespace prefix declarations.",
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        default=None,
        help="Pretty-print output. Turtle and TriG output is then buffered in memory.",
    )
    parser.add_argument(
        "--engine",
        type=str,
        default=None,
        help="Mapping engine as module:callable or entry point name (default: RML_RUNNER_ENGINE).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of threads used to read mapping files (default: 1).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=os.getenv("RML_RUNNER_CONFIG"),
        help="YAML configuration file (default: RML_RUNNER_CONFIG).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser.parse_args(argv)


def _build_settings(args: argparse.Namespace) -> Dict[str, Any]:
    settings: Dict[str, Any] = load_config_file(args.config) if args.config else {}

    env_overrides = {
        "engine": os.getenv("RML_RUNNER_ENGINE"),
        "outformat": os.getenv("RML_RUNNER_OUTPUT_FORMAT"),
    }
    settings.update({key: value for key, value in env_overrides.items() if value})

    cli_overrides = {
        "mapping": args.mapping,
        "format": args.format,
        "rel_src_loc": args.rel_src_loc,
        "input": args.input,
        "function_archives": args.function_archives,
        "functions": args.functions,
        "output": args.output,
        "outformat": args.outformat,
        "prefixes": args.prefix,
        "context": args.context,
        "pretty": args.pretty,
        "engine": args.engine,
        "workers": args.workers,
    }
    settings.update({key: value for key, value in cli_overrides.items() if value is not None})
    return settings


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = RunnerConfig.from_vars(_build_settings(args))
        count = run(config)
    except RunnerError as e:
        message = f"{e}: {e.__cause__}" if e.__cause__ is not None else str(e)
        print(f"[rml-runner] ERROR: {message}", file=sys.stderr)
        return 1

    print(f"[rml-runner] Wrote {count} statements.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
