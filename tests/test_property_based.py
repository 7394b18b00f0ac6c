from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st
from scriban_indent.config import FormatConfig
from scriban_indent.formatter import format_document
from scriban_indent.indent import apply_indentation
from scriban_indent.protect import protect_tags, restore, verify_placeholders
from scriban_indent.spacing import normalize_block_content, normalize_tag_spacing

line_strategy = st.text(alphabet="{}~- abx", max_size=40)

template_strategy = st.text(alphabet="{}~-<>/ abdivpfen\n", max_size=200)

# Keeps keywords and tags likely to appear
structured_strategy = st.lists(
    st.sampled_from(
        [
            "<div>",
            "</div>",
            "<p>x</p>",
            "<br>",
            "{{if a}}",
            "{{ else }}",
            "{{end}}",
            "{{ for i in items }}",
            "{{",
            "x = 1",
            "}}",
            "~}}",
            "</p></div>",
            "   ",
            "text",
        ]
    ),
    max_size=30,
).map("\n".join)


@given(line_strategy)
def test_normalize_tag_spacing_is_idempotent(line: str):
    once = normalize_tag_spacing(line)
    assert normalize_tag_spacing(once) == once


@given(st.text(alphabet="{}~- ab\n\t", max_size=80))
def test_normalize_block_content_has_no_blank_or_padded_lines(inner: str):
    for line in normalize_block_content(inner).split("\n"):
        if line:
            assert line == line.strip()


@given(st.one_of(template_strategy, structured_strategy))
def test_apply_indentation_is_idempotent(text: str):
    once = apply_indentation(text, "\t")
    assert apply_indentation(once, "\t") == once


@given(st.one_of(template_strategy, structured_strategy))
def test_lines_are_indented_only_with_indent_unit(text: str):
    output = apply_indentation(text, "\t")

    assert output.count("\n") == text.count("\n")
    for line in output.split("\n"):
        assert line == "" or line.lstrip("\t") == line.strip()


@given(st.one_of(template_strategy, structured_strategy))
def test_protect_and_restore_round_trip(text: str):
    protected = protect_tags(text)

    assert "{{" not in protected.text or "}}" not in protected.text.split("{{", 1)[1]
    verify_placeholders(protected.text, protected)
    assert restore(protected.text, protected) == text


@given(st.one_of(template_strategy, structured_strategy))
def test_format_without_markup_formatter_only_reindents(text: str):
    config = FormatConfig(markup_formatter=False)

    assert format_document(text, config) == apply_indentation(text, "\t\t")


@given(st.one_of(template_strategy, structured_strategy))
def test_failed_markup_formatter_only_reindents(text: str):
    def _broken(markup, options):
        raise RuntimeError("boom")

    assert format_document(text, reformatter=_broken) == apply_indentation(text, "\t\t")
