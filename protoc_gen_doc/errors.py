"""Error types raised while generating documentation."""

from __future__ import annotations


class DocGenError(RuntimeError):
    """Base class for failures that abort the whole generator run."""


class ConfigurationError(DocGenError):
    """Raised when the plugin parameter or settings file is malformed."""


class IOFailure(DocGenError):
    """Raised when a schema source, template or resource cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class TemplateError(DocGenError):
    """Raised when the template engine fails to render the document set."""

    def __init__(
        self,
        template: str,
        offset: int,
        message: str,
        *,
        partial: str | None = None,
    ) -> None:
        location = template
        if partial:
            location += f" in partial {partial}"
        super().__init__(f"{location}:{offset}: {message}")
        self.template = template
        self.partial = partial
        self.offset = offset
        self.message = message


class SerializationError(DocGenError):
    """Raised when the document set cannot be encoded as structured data."""


__all__ = [
    "ConfigurationError",
    "DocGenError",
    "IOFailure",
    "SerializationError",
    "TemplateError",
]
