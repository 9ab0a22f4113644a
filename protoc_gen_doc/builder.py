"""Builds the ordered document model for a compiled schema file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence, Tuple

from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    EnumDescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
    ServiceDescriptorProto,
    SourceCodeInfo,
)

from .comments import Description, description_of, file_description
from .fieldtypes import default_value, is_reference, label_name, scalar_type_name
from .logging import get_logger
from .models import (
    EnumRecord,
    EnumValueRecord,
    ExtensionRecord,
    FieldRecord,
    FileRecord,
    MessageRecord,
    MethodRecord,
    ServiceRecord,
    TypeRef,
)
from .naming import TypeEntry, TypeIndex, field_long_name, qualify

# Field numbers used in SourceCodeInfo paths (see descriptor.proto).
_FILE_MESSAGES = 4
_FILE_ENUMS = 5
_FILE_SERVICES = 6
_FILE_EXTENSIONS = 7
_MESSAGE_FIELDS = 2
_MESSAGE_NESTED = 3
_MESSAGE_ENUMS = 4
_MESSAGE_EXTENSIONS = 6
_ENUM_VALUES = 2
_SERVICE_METHODS = 2

SourcePath = Tuple[int, ...]


@dataclass
class _FileScope:
    """Mutable state of a single file traversal."""

    package: str
    locations: Dict[SourcePath, SourceCodeInfo.Location]
    messages: List[MessageRecord] = field(default_factory=list)
    enums: List[EnumRecord] = field(default_factory=list)


class DocumentModelBuilder:
    """Walks a ``FileDescriptorProto`` and assembles its ``FileRecord``.

    Nested messages and enums are flattened into the file-level lists and
    identified by their long names. Elements whose documentation starts
    with the exclusion marker are dropped together with everything nested
    inside them.
    """

    def __init__(
        self,
        index: TypeIndex | None = None,
        *,
        no_exclude: bool = False,
        search_roots: Sequence[Path] = (),
    ) -> None:
        self.index = index or TypeIndex()
        self.no_exclude = no_exclude
        self.search_roots = tuple(search_roots)
        self.logger = get_logger("builder")

    def build_file(self, file_proto: FileDescriptorProto) -> Optional[FileRecord]:
        """Return the record for ``file_proto`` or ``None`` when the file is excluded.

        Raises ``IOFailure`` when the schema source cannot be opened to read
        the file-level comment.
        """
        description = file_description(
            file_proto.name, no_exclude=self.no_exclude, search_roots=self.search_roots
        )
        if description.excluded:
            self.logger.debug("Excluding file %s", file_proto.name)
            return None

        self.index.add_file(file_proto)
        scope = _FileScope(package=file_proto.package, locations=_index_locations(file_proto))

        for position, message in enumerate(file_proto.message_type):
            self._add_message(message, (_FILE_MESSAGES, position), None, scope)
        for position, enum in enumerate(file_proto.enum_type):
            self._add_enum(enum, (_FILE_ENUMS, position), None, scope)

        services = []
        for position, service in enumerate(file_proto.service):
            record = self._build_service(service, (_FILE_SERVICES, position), scope)
            if record is not None:
                services.append(record)

        extensions = []
        for position, extension in enumerate(file_proto.extension):
            record = self._build_extension(extension, (_FILE_EXTENSIONS, position), None, scope)
            if record is not None:
                extensions.append(record)

        record = FileRecord(
            name=PurePosixPath(file_proto.name).name,
            description=description.text,
            package=file_proto.package,
            messages=tuple(sorted(scope.messages, key=_by_long_name)),
            enums=tuple(sorted(scope.enums, key=_by_long_name)),
            services=tuple(sorted(services, key=_by_long_name)),
            extensions=tuple(sorted(extensions, key=_by_long_name)),
        )
        self.logger.debug(
            "Built %s: %d messages, %d enums, %d services, %d extensions",
            file_proto.name,
            len(record.messages),
            len(record.enums),
            len(record.services),
            len(record.extensions),
        )
        return record

    def _describe(self, scope: _FileScope, path: SourcePath) -> Description:
        return description_of(scope.locations.get(path), no_exclude=self.no_exclude)

    def _entry(self, scope: _FileScope, parent: Optional[TypeEntry], name: str) -> TypeEntry:
        full_name = qualify(parent.full_name if parent else scope.package, name)
        entry = self.index.lookup(full_name)
        if entry is None:  # pragma: no cover - add_file indexes every declaration
            raise KeyError(full_name)
        return entry

    def _add_message(
        self,
        message: DescriptorProto,
        path: SourcePath,
        parent: Optional[TypeEntry],
        scope: _FileScope,
    ) -> None:
        description = self._describe(scope, path)
        entry = self._entry(scope, parent, message.name)
        if description.excluded:
            self.logger.debug("Excluding message %s and its nested types", entry.full_name)
            return

        fields = []
        for position, field_proto in enumerate(message.field):
            record = self._build_field(field_proto, path + (_MESSAGE_FIELDS, position), scope)
            if record is not None:
                fields.append(record)

        extensions = []
        for position, extension in enumerate(message.extension):
            record = self._build_extension(
                extension, path + (_MESSAGE_EXTENSIONS, position), entry, scope
            )
            if record is not None:
                extensions.append(record)

        scope.messages.append(
            MessageRecord(
                name=message.name,
                long_name=entry.long_name,
                full_name=entry.full_name,
                description=description.text,
                fields=tuple(fields),
                extensions=tuple(extensions),
            )
        )

        for position, nested in enumerate(message.nested_type):
            self._add_message(nested, path + (_MESSAGE_NESTED, position), entry, scope)
        for position, enum in enumerate(message.enum_type):
            self._add_enum(enum, path + (_MESSAGE_ENUMS, position), entry, scope)

    def _add_enum(
        self,
        enum: EnumDescriptorProto,
        path: SourcePath,
        parent: Optional[TypeEntry],
        scope: _FileScope,
    ) -> None:
        description = self._describe(scope, path)
        entry = self._entry(scope, parent, enum.name)
        if description.excluded:
            self.logger.debug("Excluding enum %s", entry.full_name)
            return

        values = []
        for position, value in enumerate(enum.value):
            value_description = self._describe(scope, path + (_ENUM_VALUES, position))
            if value_description.excluded:
                continue
            values.append(
                EnumValueRecord(
                    name=value.name,
                    number=value.number,
                    description=value_description.text,
                )
            )

        scope.enums.append(
            EnumRecord(
                name=enum.name,
                long_name=entry.long_name,
                full_name=entry.full_name,
                description=description.text,
                values=tuple(values),
            )
        )

    def _type_of(self, field_proto: FieldDescriptorProto) -> TypeRef:
        if is_reference(field_proto):
            return self.index.resolve(field_proto.type_name)
        return TypeRef.scalar(scalar_type_name(field_proto.type))

    def _build_field(
        self, field_proto: FieldDescriptorProto, path: SourcePath, scope: _FileScope
    ) -> Optional[FieldRecord]:
        description = self._describe(scope, path)
        if description.excluded:
            return None
        return FieldRecord(
            name=field_proto.name,
            number=field_proto.number,
            description=description.text,
            label=label_name(field_proto.label),
            type=self._type_of(field_proto),
            default_value=default_value(field_proto, self.index),
        )

    def _build_extension(
        self,
        extension: FieldDescriptorProto,
        path: SourcePath,
        extension_scope: Optional[TypeEntry],
        scope: _FileScope,
    ) -> Optional[ExtensionRecord]:
        description = self._describe(scope, path)
        if description.excluded:
            return None
        prefix = extension_scope.full_name if extension_scope else scope.package
        containing = self.index.resolve(extension.extendee) if extension.extendee else None
        return ExtensionRecord(
            name=extension.name,
            long_name=field_long_name(extension.name, extension_scope),
            full_name=qualify(prefix, extension.name),
            number=extension.number,
            description=description.text,
            label=label_name(extension.label),
            type=self._type_of(extension),
            default_value=default_value(extension, self.index),
            scope=extension_scope.ref() if extension_scope else None,
            containing_type=containing,
        )

    def _build_service(
        self, service: ServiceDescriptorProto, path: SourcePath, scope: _FileScope
    ) -> Optional[ServiceRecord]:
        description = self._describe(scope, path)
        full_name = qualify(scope.package, service.name)
        if description.excluded:
            self.logger.debug("Excluding service %s", full_name)
            return None

        methods = []
        for position, method in enumerate(service.method):
            method_description = self._describe(scope, path + (_SERVICE_METHODS, position))
            if method_description.excluded:
                continue
            methods.append(
                MethodRecord(
                    name=method.name,
                    description=method_description.text,
                    request_type=self.index.resolve(method.input_type),
                    response_type=self.index.resolve(method.output_type),
                )
            )

        return ServiceRecord(
            name=service.name,
            full_name=full_name,
            description=description.text,
            methods=tuple(methods),
        )


def _index_locations(file_proto: FileDescriptorProto) -> Dict[SourcePath, SourceCodeInfo.Location]:
    locations: Dict[SourcePath, SourceCodeInfo.Location] = {}
    for location in file_proto.source_code_info.location:
        locations.setdefault(tuple(location.path), location)
    return locations


def _by_long_name(record: MessageRecord | EnumRecord | ServiceRecord | ExtensionRecord) -> str:
    return record.long_name


__all__ = ["DocumentModelBuilder"]
