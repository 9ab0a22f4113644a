"""Qualified-name resolution for schema elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Set, Tuple

from google.protobuf.descriptor_pb2 import DescriptorProto, EnumDescriptorProto, FileDescriptorProto

from .models import TypeRef

MESSAGE = "message"
ENUM = "enum"


@dataclass(frozen=True)
class TypeEntry:
    """A message or enum declared somewhere in the compiled schema."""

    name: str
    full_name: str
    kind: str
    parent: Optional["TypeEntry"] = None
    values: Tuple[str, ...] = ()

    @property
    def long_name(self) -> str:
        return long_name(self)

    def ref(self) -> TypeRef:
        return TypeRef(name=self.name, long_name=self.long_name, full_name=self.full_name)


def long_name(entry: Optional[TypeEntry]) -> str:
    """Return the name of ``entry`` prefixed by its enclosing types, e.g. ``Foo.Bar.Baz``.

    ``None`` stands for "no enclosing type" and yields the empty string.
    """
    if entry is None:
        return ""
    if entry.parent is None:
        return entry.name
    return f"{long_name(entry.parent)}.{entry.name}"


def field_long_name(name: str, enclosing: Optional[TypeEntry]) -> str:
    """Return the long name of a field declared inside ``enclosing``.

    For a regular field ``enclosing`` is the message owning the field. For
    an extension it is the extension scope (the message the ``extend``
    block sits in), not the extended type. File-level extensions have no
    scope and keep their bare name.
    """
    prefix = long_name(enclosing)
    return f"{prefix}.{name}" if prefix else name


def qualify(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


class TypeIndex:
    """Maps fully-qualified type names to their declarations across a run.

    References are accepted with or without the leading dot protoc puts on
    ``type_name``, ``extendee`` and method input/output types.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, TypeEntry] = {}
        self._files: Set[str] = set()

    @classmethod
    def from_files(cls, files: Iterable[FileDescriptorProto]) -> "TypeIndex":
        index = cls()
        for file_proto in files:
            index.add_file(file_proto)
        return index

    def add_file(self, file_proto: FileDescriptorProto) -> None:
        if file_proto.name in self._files:
            return
        self._files.add(file_proto.name)
        for message in file_proto.message_type:
            self._add_message(message, file_proto.package, None)
        for enum in file_proto.enum_type:
            self._add_enum(enum, file_proto.package, None)

    def _add_message(
        self, message: DescriptorProto, prefix: str, parent: Optional[TypeEntry]
    ) -> None:
        entry = TypeEntry(
            name=message.name,
            full_name=qualify(prefix, message.name),
            kind=MESSAGE,
            parent=parent,
        )
        self._entries[entry.full_name] = entry
        for nested in message.nested_type:
            self._add_message(nested, entry.full_name, entry)
        for enum in message.enum_type:
            self._add_enum(enum, entry.full_name, entry)

    def _add_enum(
        self, enum: EnumDescriptorProto, prefix: str, parent: Optional[TypeEntry]
    ) -> None:
        entry = TypeEntry(
            name=enum.name,
            full_name=qualify(prefix, enum.name),
            kind=ENUM,
            parent=parent,
            values=tuple(value.name for value in enum.value),
        )
        self._entries[entry.full_name] = entry

    def lookup(self, reference: str) -> Optional[TypeEntry]:
        return self._entries.get(reference.lstrip("."))

    def resolve(self, reference: str) -> TypeRef:
        """Return the three name forms of a referenced type.

        Unknown references degrade to names derived from the reference text.
        """
        entry = self.lookup(reference)
        if entry is not None:
            return entry.ref()
        full_name = reference.lstrip(".")
        short_name = full_name.rsplit(".", 1)[-1]
        return TypeRef(name=short_name, long_name=short_name, full_name=full_name)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "ENUM",
    "MESSAGE",
    "TypeEntry",
    "TypeIndex",
    "field_long_name",
    "long_name",
    "qualify",
]
