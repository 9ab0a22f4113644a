"""Field type names, labels and default-value formatting."""

from __future__ import annotations

import math
from typing import Dict, Tuple

from google.protobuf import text_encoding
from google.protobuf.descriptor_pb2 import FieldDescriptorProto

from .naming import ENUM, TypeIndex

UNKNOWN_TYPE = "<unknown>"
UNKNOWN_DEFAULT = "Unknown"

_F = FieldDescriptorProto

SCALAR_TYPE_NAMES: Dict[int, str] = {
    _F.TYPE_BOOL: "bool",
    _F.TYPE_BYTES: "bytes",
    _F.TYPE_DOUBLE: "double",
    _F.TYPE_FIXED32: "fixed32",
    _F.TYPE_FIXED64: "fixed64",
    _F.TYPE_FLOAT: "float",
    _F.TYPE_INT32: "int32",
    _F.TYPE_INT64: "int64",
    _F.TYPE_SFIXED32: "sfixed32",
    _F.TYPE_SFIXED64: "sfixed64",
    _F.TYPE_SINT32: "sint32",
    _F.TYPE_SINT64: "sint64",
    _F.TYPE_STRING: "string",
    _F.TYPE_UINT32: "uint32",
    _F.TYPE_UINT64: "uint64",
}

LABEL_NAMES: Dict[int, str] = {
    _F.LABEL_OPTIONAL: "optional",
    _F.LABEL_REPEATED: "repeated",
    _F.LABEL_REQUIRED: "required",
}

REFERENCE_TYPES = frozenset({_F.TYPE_MESSAGE, _F.TYPE_GROUP, _F.TYPE_ENUM})

_INTEGER_RANGES: Dict[int, Tuple[int, int]] = {
    _F.TYPE_INT32: (-(2**31), 2**31 - 1),
    _F.TYPE_SINT32: (-(2**31), 2**31 - 1),
    _F.TYPE_SFIXED32: (-(2**31), 2**31 - 1),
    _F.TYPE_INT64: (-(2**63), 2**63 - 1),
    _F.TYPE_SINT64: (-(2**63), 2**63 - 1),
    _F.TYPE_SFIXED64: (-(2**63), 2**63 - 1),
    _F.TYPE_UINT32: (0, 2**32 - 1),
    _F.TYPE_FIXED32: (0, 2**32 - 1),
    _F.TYPE_UINT64: (0, 2**64 - 1),
    _F.TYPE_FIXED64: (0, 2**64 - 1),
}


def scalar_type_name(field_type: int) -> str:
    return SCALAR_TYPE_NAMES.get(field_type, UNKNOWN_TYPE)


def label_name(label: int) -> str:
    return LABEL_NAMES.get(label, UNKNOWN_TYPE)


def is_reference(field: FieldDescriptorProto) -> bool:
    """Return True when the field refers to a message, group or enum type."""
    if field.HasField("type"):
        return field.type in REFERENCE_TYPES
    return bool(field.type_name)


def default_value(field: FieldDescriptorProto, index: TypeIndex) -> str:
    """Return the declared default of ``field`` in canonical text form.

    Returns an empty string when no default is declared and ``Unknown`` when
    the default cannot be interpreted for the field's type.
    """
    if not field.HasField("default_value"):
        return ""
    text = field.default_value
    field_type = field.type

    if field_type == _F.TYPE_STRING:
        return f'"{text}"'
    if field_type == _F.TYPE_BYTES:
        try:
            raw = text_encoding.CUnescape(text)
        except (ValueError, UnicodeError):
            return UNKNOWN_DEFAULT
        return "0x" + raw.hex()
    if field_type == _F.TYPE_BOOL:
        return text if text in ("true", "false") else UNKNOWN_DEFAULT
    if field_type in (_F.TYPE_FLOAT, _F.TYPE_DOUBLE):
        return _format_float(text)
    if field_type in _INTEGER_RANGES:
        return _format_integer(text, *_INTEGER_RANGES[field_type])
    if field_type == _F.TYPE_ENUM:
        entry = index.lookup(field.type_name)
        if entry is not None and entry.kind == ENUM and text in entry.values:
            return text
    return UNKNOWN_DEFAULT


def _format_float(text: str) -> str:
    try:
        value = float(text)
    except ValueError:
        return UNKNOWN_DEFAULT
    if math.isnan(value):
        return "nan"
    return format(value, "g")


def _format_integer(text: str, low: int, high: int) -> str:
    try:
        value = int(text)
    except ValueError:
        return UNKNOWN_DEFAULT
    if not low <= value <= high:
        return UNKNOWN_DEFAULT
    return str(value)


__all__ = [
    "LABEL_NAMES",
    "SCALAR_TYPE_NAMES",
    "UNKNOWN_DEFAULT",
    "UNKNOWN_TYPE",
    "default_value",
    "is_reference",
    "label_name",
    "scalar_type_name",
]
