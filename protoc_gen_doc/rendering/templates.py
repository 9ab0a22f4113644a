"""Built-in template discovery and template/resource loading."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import IOFailure

TEMPLATES_DIR = Path(__file__).with_name("templates")
TEMPLATE_SUFFIX = ".jinja"
JSON_FORMAT = "json"
SCALAR_VALUE_TYPES = "scalar_value_types.json"


@dataclass(frozen=True)
class TemplateSource:
    """A template selected by the plugin parameter.

    ``name`` is the selector as given (a format name or a path) and is used
    to identify the template in error messages. ``search_dir`` is the
    directory partials are resolved against first.
    """

    name: str
    source: str
    path: Path
    builtin: bool = False

    @property
    def search_dir(self) -> Path:
        return self.path.parent


def supported_formats() -> List[str]:
    """Return the format names accepted in place of a template path."""
    formats = {entry.name[: -len(TEMPLATE_SUFFIX)] for entry in TEMPLATES_DIR.glob(f"*{TEMPLATE_SUFFIX}")}
    formats.add(JSON_FORMAT)
    return sorted(formats)


def usage() -> str:
    formats = "|".join(supported_formats())
    return f"Usage: --doc_out={formats}|<TEMPLATE_FILENAME>,<OUT_FILENAME>[,no-exclude]:<OUT_DIR>"


def read_template(selector: str) -> TemplateSource:
    """Load a built-in template by format name, or a user template by path."""
    builtin = selector in supported_formats()
    path = TEMPLATES_DIR / f"{selector}{TEMPLATE_SUFFIX}" if builtin else Path(selector)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOFailure(str(path), exc.strerror or str(exc)) from exc
    return TemplateSource(name=selector, source=source, path=path, builtin=builtin)


def load_scalar_value_types(path: Optional[Path] = None) -> List[Dict[str, Any]]:
    """Return the scalar type reference table shipped with the templates."""
    path = path or TEMPLATES_DIR / SCALAR_VALUE_TYPES
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise IOFailure(str(path), exc.strerror or str(exc)) from exc
    try:
        rows = json.loads(text)
    except ValueError as exc:
        raise IOFailure(str(path), f"invalid JSON: {exc}") from exc
    if not isinstance(rows, list):
        raise IOFailure(str(path), "expected a JSON array")
    return rows


__all__ = [
    "JSON_FORMAT",
    "TEMPLATES_DIR",
    "TemplateSource",
    "load_scalar_value_types",
    "read_template",
    "supported_formats",
    "usage",
]
