"""Document model records handed from the builder to the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class TypeRef:
    """A referenced type name in its short, long and fully-qualified forms."""

    name: str
    long_name: str
    full_name: str

    @classmethod
    def scalar(cls, keyword: str) -> "TypeRef":
        return cls(name=keyword, long_name=keyword, full_name=keyword)


@dataclass(frozen=True)
class FieldRecord:
    """A documented message field."""

    name: str
    number: int
    description: str
    label: str
    type: TypeRef
    default_value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_name": self.name,
            "field_number": self.number,
            "field_description": self.description,
            "field_label": self.label,
            "field_default_value": self.default_value,
            "field_type": self.type.name,
            "field_long_type": self.type.long_name,
            "field_full_type": self.type.full_name,
        }


@dataclass(frozen=True)
class ExtensionRecord:
    """A documented extension field.

    ``scope`` is the message that declares the extension, ``containing_type``
    the message being extended. Either may be missing; a file-level
    extension has no scope.
    """

    name: str
    long_name: str
    full_name: str
    number: int
    description: str
    label: str
    type: TypeRef
    default_value: str = ""
    scope: Optional[TypeRef] = None
    containing_type: Optional[TypeRef] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "extension_name": self.name,
            "extension_full_name": self.full_name,
            "extension_long_name": self.long_name,
            "extension_number": self.number,
            "extension_description": self.description,
            "extension_label": self.label,
            "extension_default_value": self.default_value,
            "extension_type": self.type.name,
            "extension_long_type": self.type.long_name,
            "extension_full_type": self.type.full_name,
        }
        if self.scope is not None:
            data["extension_scope_type"] = self.scope.name
            data["extension_scope_long_type"] = self.scope.long_name
            data["extension_scope_full_type"] = self.scope.full_name
        if self.containing_type is not None:
            data["extension_containing_type"] = self.containing_type.name
            data["extension_containing_long_type"] = self.containing_type.long_name
            data["extension_containing_full_type"] = self.containing_type.full_name
        return data


@dataclass(frozen=True)
class MessageRecord:
    """A documented message. Nesting is expressed through ``long_name`` only."""

    name: str
    long_name: str
    full_name: str
    description: str
    fields: Tuple[FieldRecord, ...] = ()
    extensions: Tuple[ExtensionRecord, ...] = ()

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)

    @property
    def has_extensions(self) -> bool:
        return bool(self.extensions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message_name": self.name,
            "message_long_name": self.long_name,
            "message_full_name": self.full_name,
            "message_description": self.description,
            "message_fields": [item.to_dict() for item in self.fields],
            "message_has_fields": self.has_fields,
            "message_extensions": [item.to_dict() for item in self.extensions],
            "message_has_extensions": self.has_extensions,
        }


@dataclass(frozen=True)
class EnumValueRecord:
    name: str
    number: int
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value_name": self.name,
            "value_number": self.number,
            "value_description": self.description,
        }


@dataclass(frozen=True)
class EnumRecord:
    """A documented enum with its values in declaration order."""

    name: str
    long_name: str
    full_name: str
    description: str
    values: Tuple[EnumValueRecord, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enum_name": self.name,
            "enum_long_name": self.long_name,
            "enum_full_name": self.full_name,
            "enum_description": self.description,
            "enum_values": [value.to_dict() for value in self.values],
        }


@dataclass(frozen=True)
class MethodRecord:
    name: str
    description: str
    request_type: TypeRef
    response_type: TypeRef

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method_name": self.name,
            "method_description": self.description,
            "method_request_type": self.request_type.name,
            "method_request_long_type": self.request_type.long_name,
            "method_request_full_type": self.request_type.full_name,
            "method_response_type": self.response_type.name,
            "method_response_long_type": self.response_type.long_name,
            "method_response_full_type": self.response_type.full_name,
        }


@dataclass(frozen=True)
class ServiceRecord:
    """A documented service. Services are top-level, so the long name is the name."""

    name: str
    full_name: str
    description: str
    methods: Tuple[MethodRecord, ...] = ()

    @property
    def long_name(self) -> str:
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_name": self.name,
            "service_full_name": self.full_name,
            "service_description": self.description,
            "service_methods": [method.to_dict() for method in self.methods],
        }


@dataclass(frozen=True)
class FileRecord:
    """Documentation for a single schema file.

    Top-level lists hold every message and enum of the file, nested ones
    included, sorted by long name.
    """

    name: str
    description: str
    package: str
    messages: Tuple[MessageRecord, ...] = field(default_factory=tuple)
    enums: Tuple[EnumRecord, ...] = field(default_factory=tuple)
    services: Tuple[ServiceRecord, ...] = field(default_factory=tuple)
    extensions: Tuple[ExtensionRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_name": self.name,
            "file_description": self.description,
            "file_package": self.package,
            "file_messages": [message.to_dict() for message in self.messages],
            "file_enums": [enum.to_dict() for enum in self.enums],
            "file_services": [service.to_dict() for service in self.services],
            "file_has_services": bool(self.services),
            "file_extensions": [extension.to_dict() for extension in self.extensions],
            "file_has_extensions": bool(self.extensions),
        }
