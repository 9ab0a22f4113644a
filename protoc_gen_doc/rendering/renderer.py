"""Renders the accumulated document set through Jinja2 or as raw JSON."""

from __future__ import annotations

import json
import traceback
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, TemplateSyntaxError

from ..errors import SerializationError, TemplateError
from ..logging import get_logger
from ..models import FileRecord
from .filters import FILTERS
from .templates import TEMPLATES_DIR, TemplateSource, load_scalar_value_types

_MAIN_TEMPLATE_FILENAME = "<template>"
_ESCAPED_SUFFIXES = {".html", ".htm", ".xml", ".docbook"}
_ESCAPED_FORMATS = {"html", "docbook"}


class Renderer:
    """Turns a list of file records into the single output document."""

    def __init__(
        self,
        *,
        templates_dir: Path | None = None,
        scalar_value_types_path: Path | None = None,
    ) -> None:
        self.templates_dir = templates_dir
        self.scalar_value_types_path = scalar_value_types_path
        self.logger = get_logger("renderer")

    def render(self, files: Sequence[FileRecord], template: Optional[TemplateSource]) -> str:
        """Render ``files`` with ``template``, or serialize them when it is ``None``."""
        payload = [record.to_dict() for record in files]
        if template is None:
            self.logger.debug("Serializing %d files as JSON", len(payload))
            return self.serialize(payload)
        self.logger.debug("Rendering %d files with template %s", len(payload), template.name)
        return self.render_template(template, payload)

    @staticmethod
    def serialize(payload: List[Dict[str, Any]]) -> str:
        try:
            return json.dumps(payload, indent=4, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to create JSON document: {exc}") from exc

    def render_template(self, template: TemplateSource, payload: List[Dict[str, Any]]) -> str:
        env = self._create_env(template)
        context = {
            "files": payload,
            "scalar_value_types": load_scalar_value_types(self.scalar_value_types_path),
        }
        try:
            return env.from_string(template.source).render(context)
        except Exception as exc:
            raise self._template_error(template, env, exc) from exc

    def search_path(self, template: TemplateSource) -> List[str]:
        directories = [template.search_dir]
        if self.templates_dir:
            directories.append(self.templates_dir)
        directories.append(TEMPLATES_DIR)
        # ensure uniqueness preserving order
        seen: set[str] = set()
        ordered: list[str] = []
        for directory in directories:
            resolved = str(Path(directory).resolve())
            if resolved not in seen:
                ordered.append(resolved)
                seen.add(resolved)
        return ordered

    def _create_env(self, template: TemplateSource) -> Environment:
        env = Environment(
            loader=FileSystemLoader(self.search_path(template)),
            autoescape=_wants_autoescape(template),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters.update(FILTERS)
        return env

    def _template_error(
        self, template: TemplateSource, env: Environment, exc: Exception
    ) -> TemplateError:
        search_dirs = [Path(directory) for directory in env.loader.searchpath]  # type: ignore[union-attr]
        partial, partial_file, lineno = _error_origin(exc, search_dirs)
        if partial is None:
            source: Optional[str] = template.source
        elif isinstance(exc, TemplateSyntaxError) and exc.source is not None:
            source = exc.source
        else:
            source = _read_quietly(partial_file)
        message = getattr(exc, "message", None) or str(exc) or type(exc).__name__
        return TemplateError(
            template.name,
            _line_offset(source, lineno),
            message,
            partial=partial,
        )


def _wants_autoescape(template: TemplateSource) -> bool:
    if template.builtin:
        return template.name in _ESCAPED_FORMATS
    return bool(_ESCAPED_SUFFIXES.intersection(suffix.lower() for suffix in template.path.suffixes))


def _error_origin(
    exc: Exception, search_dirs: Sequence[Path]
) -> Tuple[Optional[str], Optional[str], Optional[int]]:
    """Locate the template (main or partial) and line an engine error points at."""
    if isinstance(exc, TemplateSyntaxError):
        if exc.name is None or exc.filename == _MAIN_TEMPLATE_FILENAME:
            return None, None, exc.lineno
        return exc.name, exc.filename, exc.lineno

    for frame in reversed(traceback.extract_tb(exc.__traceback__)):
        if frame.filename == _MAIN_TEMPLATE_FILENAME:
            return None, None, frame.lineno
        frame_path = Path(frame.filename)
        for directory in search_dirs:
            if frame_path.is_relative_to(directory):
                return frame_path.relative_to(directory).as_posix(), frame.filename, frame.lineno
    return None, None, None


def _read_quietly(path: Optional[str]) -> Optional[str]:
    if path is None:
        return None
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError:
        return None


def _line_offset(source: Optional[str], lineno: Optional[int]) -> int:
    """Return the character offset at which line ``lineno`` of ``source`` starts."""
    if not source or not lineno or lineno <= 1:
        return 0
    lines = source.splitlines(keepends=True)
    return sum(len(line) for line in lines[: lineno - 1])


__all__ = ["Renderer"]
