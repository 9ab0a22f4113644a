"""Rendering of the document model through templates or as JSON."""

from __future__ import annotations

from .filters import FILTERS
from .renderer import Renderer
from .templates import (
    JSON_FORMAT,
    TemplateSource,
    load_scalar_value_types,
    read_template,
    supported_formats,
    usage,
)

__all__ = [
    "FILTERS",
    "JSON_FORMAT",
    "Renderer",
    "TemplateSource",
    "load_scalar_value_types",
    "read_template",
    "supported_formats",
    "usage",
]
