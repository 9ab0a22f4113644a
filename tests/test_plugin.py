"""Tests for the protoc request/response handling."""

from __future__ import annotations

import json

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorResponse

from protoc_gen_doc.config import GeneratorSettings
from protoc_gen_doc.plugin import PluginHost, run_plugin
from tests._fixtures.proto_builder import ProtoBuilder


def _settings(proto_builder: ProtoBuilder) -> GeneratorSettings:
    return GeneratorSettings(root=proto_builder.path(), source_roots=[proto_builder.path()])


def _schema(proto_builder: ProtoBuilder):
    common = proto_builder.descriptor(
        "common.proto", 'package: "common" message_type { name: "Money" }'
    )
    order = proto_builder.descriptor(
        "order.proto",
        """
        package: "shop"
        dependency: "common.proto"
        message_type {
          name: "Order"
          field { name: "total" number: 1 label: LABEL_OPTIONAL type: TYPE_MESSAGE type_name: ".common.Money" }
        }
        """,
        source='/// Orders.\nsyntax = "proto2";\n',
    )
    return common, order


def test_json_run_returns_single_output_file(proto_builder: ProtoBuilder) -> None:
    common, order = _schema(proto_builder)
    request = proto_builder.request([order], "json,doc.json", dependencies=[common])

    response = run_plugin(request, settings=_settings(proto_builder))

    assert not response.HasField("error")
    assert response.supported_features == CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL
    assert [output.name for output in response.file] == ["doc.json"]
    document = json.loads(response.file[0].content)
    assert [entry["file_name"] for entry in document] == ["order.proto"]
    assert document[0]["file_description"] == "Orders."
    field = document[0]["file_messages"][0]["message_fields"][0]
    assert field["field_full_type"] == "common.Money"
    assert field["field_long_type"] == "Money"


def test_markdown_run_renders_every_generated_file(proto_builder: ProtoBuilder) -> None:
    common, order = _schema(proto_builder)
    request = proto_builder.request([common, order], "markdown,README.md")

    response = run_plugin(request, settings=_settings(proto_builder))

    (output,) = response.file
    assert output.name == "README.md"
    assert "## common.proto" in output.content
    assert "## order.proto" in output.content


def test_bad_parameter_becomes_error_response(proto_builder: ProtoBuilder) -> None:
    _, order = _schema(proto_builder)
    request = proto_builder.request([order], "html")

    response = run_plugin(request, settings=_settings(proto_builder))

    assert "Usage:" in response.error
    assert len(response.file) == 0
    assert response.supported_features == CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL


def test_unreadable_source_becomes_error_response(proto_builder: ProtoBuilder, tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    _, order = _schema(proto_builder)
    (proto_builder.path() / "order.proto").unlink()
    request = proto_builder.request([order], "json,doc.json")

    response = run_plugin(request, settings=_settings(proto_builder))

    assert "order.proto" in response.error
    assert len(response.file) == 0


def test_missing_descriptor_becomes_error_response(proto_builder: ProtoBuilder) -> None:
    _, order = _schema(proto_builder)
    request = proto_builder.request([order], "json,doc.json")
    request.file_to_generate.append("ghost.proto")

    response = run_plugin(request, settings=_settings(proto_builder))

    assert "ghost.proto" in response.error


def test_plugin_host_collects_written_files(proto_builder: ProtoBuilder) -> None:
    common, order = _schema(proto_builder)
    host = PluginHost(proto_builder.request([order], "json,x", dependencies=[common]))

    host.write("x", "content")

    assert host.parsed_files() == ["order.proto"]
    assert [file_proto.name for file_proto in host.proto_files()] == ["common.proto", "order.proto"]
    assert host.response.file[0].content == "content"
