"""Recover documentation comments for schema elements and whole files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from google.protobuf.descriptor_pb2 import SourceCodeInfo

from .errors import IOFailure

EXCLUDE_MARKER = "@exclude"

_LEADING_SPACE = re.compile(r"^ ", re.MULTILINE)


@dataclass(frozen=True)
class Description:
    """Documentation text of an element plus its exclusion flag."""

    text: str
    excluded: bool = False


def apply_exclusion(text: str, *, no_exclude: bool = False) -> Description:
    """Trim ``text`` and consume a leading exclusion marker if present.

    The text following the marker is kept as the description even when the
    element is excluded.
    """
    text = text.strip()
    if not text.startswith(EXCLUDE_MARKER):
        return Description(text)
    remainder = text[len(EXCLUDE_MARKER):].lstrip()
    return Description(remainder, excluded=not no_exclude)


def description_of(
    location: Optional[SourceCodeInfo.Location], *, no_exclude: bool = False
) -> Description:
    """Return the description attached to a source location.

    Leading comments come first, trailing comments second. Only comments
    written in documentation style (``/** ... */`` or ``/// ...``) count.
    """
    if location is None:
        return Description("")
    text = _documentation_text(location.leading_comments)
    text += _documentation_text(location.trailing_comments)
    return apply_exclusion(text, no_exclude=no_exclude)


def _documentation_text(comment: str) -> str:
    # protoc hands over comment bodies without the outer "//" or "/*" so a
    # documentation comment still starts with its extra "/" or "*".
    if comment.startswith("*"):
        body = comment[1:]
    elif comment.startswith("/"):
        body = "\n".join(
            line[1:] if line.startswith("/") else line for line in comment.split("\n")
        )
    else:
        return ""
    return _LEADING_SPACE.sub("", body)


def scan_file_comment(lines: Iterable[str]) -> str:
    """Extract the comment block that opens a schema file.

    The block is either a run of ``///`` lines or one ``/** ... */``
    comment starting at the first non-blank line. Anything else yields an
    empty string.
    """
    stream = (line.strip() for line in lines)
    for line in stream:
        if not line:
            continue
        if line.startswith("///"):
            return _collect_line_comments(line, stream)
        if line.startswith("/**") and not line.startswith("/***/"):
            return _collect_block_comment(line[2:], stream)
        break
    return ""


def _collect_line_comments(first: str, stream: Iterator[str]) -> str:
    collected = []
    line: Optional[str] = first
    while line is not None and line.startswith("///"):
        collected.append(line[4:] if line.startswith("/// ") else line[3:])
        line = next(stream, None)
    return "\n".join(collected)


def _collect_block_comment(first: str, stream: Iterator[str]) -> str:
    collected = []
    line: Optional[str] = first
    while line is not None:
        end = line.find("*/")
        if end != -1:
            start = 0 if line.startswith("*/") else _star_prefix_length(line)
            collected.append(line[start:end])
            break
        collected.append(line[_star_prefix_length(line):])
        line = next(stream, None)
    return "\n".join(collected)


def _star_prefix_length(line: str) -> int:
    if line.startswith("* "):
        return 2
    if line.startswith("*") or line.startswith(" "):
        return 1
    return 0


def resolve_source(name: str, search_roots: Sequence[Path] = ()) -> Path:
    """Return the on-disk path for a schema file name.

    Search roots are tried in order; the working directory is the fallback.
    """
    for root in search_roots:
        candidate = Path(root) / name
        if candidate.is_file():
            return candidate
    return Path(name)


def file_description(
    name: str,
    *,
    no_exclude: bool = False,
    search_roots: Sequence[Path] = (),
) -> Description:
    """Return the description of a whole schema file by scanning its source."""
    path = resolve_source(name, search_roots)
    try:
        with path.open("r", encoding="utf-8-sig", errors="replace") as handle:
            text = scan_file_comment(handle)
    except OSError as exc:
        raise IOFailure(str(path), exc.strerror or str(exc)) from exc
    return apply_exclusion(text, no_exclude=no_exclude)


__all__ = [
    "Description",
    "EXCLUDE_MARKER",
    "apply_exclusion",
    "description_of",
    "file_description",
    "resolve_source",
    "scan_file_comment",
]
