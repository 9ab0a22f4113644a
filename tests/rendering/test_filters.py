"""Tests for the paragraph and line-break template filters."""

from __future__ import annotations

from pathlib import Path

from protoc_gen_doc.models import FileRecord
from protoc_gen_doc.rendering import Renderer, TemplateSource
from protoc_gen_doc.rendering.filters import remove_line_breaks, wrap_paragraphs


def _template(tmp_path: Path, name: str, source: str) -> TemplateSource:
    return TemplateSource(name=name, source=source, path=tmp_path / name)


def _record(description: str) -> FileRecord:
    return FileRecord(name="notes.proto", description=description, package="notes")


def test_wrap_paragraphs_splits_on_blank_lines() -> None:
    text = "First line\nstill first.\n\nSecond.\r\n  \r\nThird."
    assert wrap_paragraphs(text, "<p>", "</p>") == (
        "<p>First line\nstill first.</p><p>Second.</p><p>Third.</p>"
    )


def test_wrap_paragraphs_single_paragraph() -> None:
    assert wrap_paragraphs("Only one.", "<para>", "</para>") == "<para>Only one.</para>"


def test_remove_line_breaks_handles_every_newline_style() -> None:
    assert remove_line_breaks("a\r\nb\nc\rd") == "abcd"


def test_block_filter_transforms_rendered_content(tmp_path: Path) -> None:
    template = _template(
        tmp_path,
        "doc.txt",
        "{% for file in files %}{% filter p %}{{ file.file_description }}{% endfilter %}{% endfor %}",
    )

    output = Renderer().render([_record("One.\n\nTwo.")], template)

    assert output == "<p>One.</p><p>Two.</p>"


def test_nobr_filter_joins_lines(tmp_path: Path) -> None:
    template = _template(
        tmp_path,
        "table.md",
        "| {% filter nobr %}{{ files[0].file_description }}{% endfilter %} |",
    )

    assert Renderer().render([_record("a\nb\nc")], template) == "| abc |"


def test_para_filter_escapes_text_under_autoescape(tmp_path: Path) -> None:
    template = _template(
        tmp_path,
        "book.xml",
        "{% filter para %}{{ files[0].file_description }}{% endfilter %}",
    )

    output = Renderer().render([_record("a < b\n\nc & d")], template)

    assert output == "<para>a &lt; b</para><para>c &amp; d</para>"


def test_inline_filter_use(tmp_path: Path) -> None:
    template = _template(tmp_path, "inline.html", "{{ files[0].file_description | p }}")

    assert Renderer().render([_record("<b>\n\nx")], template) == "<p>&lt;b&gt;</p><p>x</p>"
