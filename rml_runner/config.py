"""Configuration object for rml-runner."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return [str(value)]


@dataclass
class RunnerConfig:
    mapping_paths: List[str] = field(default_factory=list)
    mapping_format: Optional[str] = None
    relative_source_location: Optional[str] = None
    input_path: Optional[str] = None
    function_archives: List[str] = field(default_factory=list)
    functions: List[str] = field(default_factory=list)
    output_path: Optional[str] = None
    output_format: Optional[str] = None
    prefixes: Optional[List[str]] = None
    context_path: Optional[str] = None
    pretty: bool = False
    engine: Optional[str] = None
    workers: int = 1

    @classmethod
    def from_vars(cls, vars_dict: Dict[str, Any]) -> "RunnerConfig":
        settings = vars_dict or {}
        prefixes = settings.get("prefixes")
        try:
            workers = int(settings.get("workers", 1))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid workers value: {settings.get('workers')!r}") from exc
        return cls(
            mapping_paths=_as_list(settings.get("mapping")),
            mapping_format=settings.get("format"),
            relative_source_location=settings.get("rel_src_loc"),
            input_path=settings.get("input"),
            function_archives=_as_list(settings.get("function_archives")),
            functions=_as_list(settings.get("functions")),
            output_path=settings.get("output"),
            output_format=settings.get("outformat"),
            prefixes=_as_list(prefixes) if prefixes is not None else None,
            context_path=settings.get("context"),
            pretty=bool(settings.get("pretty", False)),
            engine=settings.get("engine"),
            workers=workers,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "mapping": list(self.mapping_paths),
            "format": self.mapping_format,
            "rel_src_loc": self.relative_source_location,
            "input": self.input_path,
            "function_archives": list(self.function_archives),
            "functions": list(self.functions),
            "output": self.output_path,
            "outformat": self.output_format,
            "prefixes": list(self.prefixes) if self.prefixes is not None else None,
            "context": self.context_path,
            "pretty": self.pretty,
            "engine": self.engine,
            "workers": self.workers,
        }


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """Read a YAML configuration file into a flat settings mapping.

    Keys match ``RunnerConfig.as_dict``. An empty file yields no settings.
    """

    config_file = Path(path)
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found at {config_file}")
    try:
        settings = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse configuration file {config_file}: {exc}") from exc
    if settings is None:
        return {}
    if not isinstance(settings, dict):
        raise ConfigError(f"Configuration file {config_file} must contain a mapping")
    return settings
