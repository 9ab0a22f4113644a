"""Plugin parameter parsing and settings loading (.protoc-gen-doc.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigurationError, IOFailure
from .rendering.templates import JSON_FORMAT, TemplateSource, read_template, usage

NO_EXCLUDE_TOKEN = "no-exclude"
SETTINGS_ENV_VAR = "PROTOC_GEN_DOC_CONFIG"
SETTINGS_FILE_NAME = ".protoc-gen-doc.yml"


@dataclass(frozen=True)
class PluginOptions:
    """Run options parsed from ``--doc_out=<template>,<output>[,no-exclude]``."""

    template_name: str
    output_file_name: str
    no_exclude: bool = False
    template: Optional[TemplateSource] = None

    @property
    def raw_output(self) -> bool:
        """True when the document set is emitted as JSON instead of rendered."""
        return self.template is None


def parse_parameter(parameter: str) -> PluginOptions:
    """Parse the plugin parameter string.

    Raises ``ConfigurationError`` with the usage line when the parameter is
    malformed and ``IOFailure`` when the selected template cannot be read.
    """
    tokens = parameter.split(",")
    if len(tokens) not in (2, 3):
        raise ConfigurationError(usage())

    no_exclude = False
    if len(tokens) == 3:
        if tokens[2] != NO_EXCLUDE_TOKEN:
            raise ConfigurationError(usage())
        no_exclude = True

    template_name, output_file_name = tokens[0], tokens[1]
    if not template_name or not output_file_name:
        raise ConfigurationError(usage())

    template = None if template_name == JSON_FORMAT else read_template(template_name)
    return PluginOptions(
        template_name=template_name,
        output_file_name=output_file_name,
        no_exclude=no_exclude,
        template=template,
    )


@dataclass
class GeneratorSettings:
    """Optional settings read from .protoc-gen-doc.yml."""

    root: Path
    verbose: bool = False
    log_file: Optional[Path] = None
    source_roots: List[Path] = field(default_factory=list)
    templates_dir: Optional[Path] = None


def settings_path(environ: Mapping[str, str] | None = None, cwd: Path | None = None) -> Path:
    """Return the settings file location for this process."""
    environ = os.environ if environ is None else environ
    override = environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return (cwd or Path.cwd()) / SETTINGS_FILE_NAME


def load_settings(config_path: Path | None = None) -> GeneratorSettings:
    """Load settings from disk; a missing file yields defaults.

    Relative paths inside the file are resolved against its directory.
    Raises ``ConfigurationError`` for malformed content and ``IOFailure``
    when the file exists but cannot be read.
    """
    config_file = (config_path or settings_path()).expanduser()
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GeneratorSettings(root=root)

    data = _read_settings(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file.name} must contain a mapping at the root")

    log_file = _as_str(data.get("log_file"))
    templates_dir = _as_str(data.get("templates_dir"))
    return GeneratorSettings(
        root=root,
        verbose=_as_bool(data.get("verbose")) or False,
        log_file=root / log_file if log_file else None,
        source_roots=[root / entry for entry in _as_str_list(data.get("source_roots"))],
        templates_dir=root / templates_dir if templates_dir else None,
    )


def _read_settings(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOFailure(str(path), exc.strerror or str(exc)) from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "GeneratorSettings",
    "NO_EXCLUDE_TOKEN",
    "PluginOptions",
    "SETTINGS_ENV_VAR",
    "SETTINGS_FILE_NAME",
    "load_settings",
    "parse_parameter",
    "settings_path",
]
