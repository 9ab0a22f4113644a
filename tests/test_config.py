"""Tests for protoc_gen_doc.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from protoc_gen_doc.config import (
    SETTINGS_ENV_VAR,
    GeneratorSettings,
    load_settings,
    parse_parameter,
    settings_path,
)
from protoc_gen_doc.errors import ConfigurationError, IOFailure


def test_parse_parameter_with_builtin_format() -> None:
    options = parse_parameter("html,index.html")

    assert options.template_name == "html"
    assert options.output_file_name == "index.html"
    assert options.no_exclude is False
    assert options.template is not None
    assert options.template.builtin is True
    assert options.raw_output is False


def test_parse_parameter_json_with_no_exclude() -> None:
    options = parse_parameter("json,doc.json,no-exclude")

    assert options.raw_output is True
    assert options.template is None
    assert options.no_exclude is True
    assert options.output_file_name == "doc.json"


def test_parse_parameter_reads_user_template(tmp_path: Path) -> None:
    template = tmp_path / "custom.tmpl"
    template.write_text("{{ files | length }}", encoding="utf-8")

    options = parse_parameter(f"{template},out.txt")

    assert options.template is not None
    assert options.template.builtin is False
    assert options.template.source == "{{ files | length }}"
    assert options.template.name == str(template)


@pytest.mark.parametrize(
    "parameter",
    ["", "html", "html,index.html,no-exclude,extra", "html,index.html,exclude", ",index.html", "html,"],
)
def test_parse_parameter_rejects_malformed_input(parameter: str) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        parse_parameter(parameter)

    assert str(excinfo.value).startswith("Usage: --doc_out=")
    assert "no-exclude" in str(excinfo.value)


def test_parse_parameter_missing_template_is_io_failure(tmp_path: Path) -> None:
    with pytest.raises(IOFailure):
        parse_parameter(f"{tmp_path / 'absent.tmpl'},out.txt")


def test_load_settings_returns_defaults_when_missing(tmp_path: Path) -> None:
    settings = load_settings(tmp_path / ".protoc-gen-doc.yml")

    assert isinstance(settings, GeneratorSettings)
    assert settings.root == tmp_path.resolve()
    assert settings.verbose is False
    assert settings.log_file is None
    assert settings.source_roots == []
    assert settings.templates_dir is None


def test_load_settings_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".protoc-gen-doc.yml"
    config_file.write_text(
        """
verbose: yes
log_file: logs/doc.log
source_roots:
  - protos
  - third_party/protos
templates_dir: templates
""",
        encoding="utf-8",
    )

    settings = load_settings(config_file)
    root = tmp_path.resolve()

    assert settings.verbose is True
    assert settings.log_file == root / "logs" / "doc.log"
    assert settings.source_roots == [root / "protos", root / "third_party" / "protos"]
    assert settings.templates_dir == root / "templates"


def test_load_settings_accepts_single_source_root(tmp_path: Path) -> None:
    config_file = tmp_path / "settings.yml"
    config_file.write_text("source_roots: src\n", encoding="utf-8")

    assert load_settings(config_file).source_roots == [tmp_path.resolve() / "src"]


def test_load_settings_empty_file_yields_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / ".protoc-gen-doc.yml"
    config_file.write_text("\n", encoding="utf-8")

    assert load_settings(config_file).source_roots == []


def test_load_settings_rejects_invalid_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / ".protoc-gen-doc.yml"
    config_file.write_text("source_roots: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_settings(config_file)


def test_load_settings_rejects_non_mapping_root(tmp_path: Path) -> None:
    config_file = tmp_path / ".protoc-gen-doc.yml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        load_settings(config_file)
    assert "mapping" in str(excinfo.value)


def test_settings_path_prefers_environment_override(tmp_path: Path) -> None:
    override = tmp_path / "custom.yml"

    assert settings_path({SETTINGS_ENV_VAR: str(override)}, cwd=tmp_path / "elsewhere") == override
    assert settings_path({}, cwd=tmp_path) == tmp_path / ".protoc-gen-doc.yml"


def test_load_settings_unreadable_file_is_io_failure(tmp_path: Path) -> None:
    config_dir = tmp_path / ".protoc-gen-doc.yml"
    config_dir.mkdir()

    with pytest.raises(IOFailure) as excinfo:
        load_settings(config_dir)
    assert str(config_dir) in str(excinfo.value)
