"""protoc plugin protocol: request in, response out."""

from __future__ import annotations

from typing import Dict, List

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse
from google.protobuf.descriptor_pb2 import FileDescriptorProto

from .config import GeneratorSettings
from .driver import DocGenerator
from .errors import DocGenError
from .logging import get_logger

logger = get_logger("plugin")


class PluginHost:
    """Exposes a ``CodeGeneratorRequest`` to the driver and collects its output."""

    def __init__(self, request: CodeGeneratorRequest) -> None:
        self.request = request
        self.response = CodeGeneratorResponse(
            supported_features=CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
        )
        self._descriptors: Dict[str, FileDescriptorProto] = {
            file_proto.name: file_proto for file_proto in request.proto_file
        }

    def parsed_files(self) -> List[str]:
        return list(self.request.file_to_generate)

    def proto_files(self) -> List[FileDescriptorProto]:
        return list(self.request.proto_file)

    def descriptor(self, name: str) -> FileDescriptorProto:
        try:
            return self._descriptors[name]
        except KeyError:
            raise DocGenError(f"{name}: no descriptor in the code generator request") from None

    def write(self, name: str, content: str) -> None:
        self.response.file.add(name=name, content=content)


def run_plugin(
    request: CodeGeneratorRequest,
    *,
    settings: GeneratorSettings | None = None,
    generator: DocGenerator | None = None,
) -> CodeGeneratorResponse:
    """Run the generator once per file to generate and return protoc's response.

    A failed run yields a response carrying only the error message.
    """
    host = PluginHost(request)
    generator = generator or DocGenerator(settings=settings)
    try:
        for name in host.parsed_files():
            generator.generate(host.descriptor(name), request.parameter, host)
    except DocGenError as exc:
        logger.debug("Generation aborted: %s", exc)
        return CodeGeneratorResponse(
            error=str(exc),
            supported_features=CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL,
        )
    return host.response


__all__ = ["PluginHost", "run_plugin"]
