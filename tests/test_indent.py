import textwrap

from scriban_indent.indent import apply_indentation, indent_line, is_closing_only_line
from scriban_indent.models import IndentState


def _doc(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


def test_markup_nesting():
    source = _doc(
        """
        <ul>
        <li>a</li>
        <li>b</li>
        </ul>
        """
    )

    assert apply_indentation(source, "\t") == "<ul>\n\t<li>a</li>\n\t<li>b</li>\n</ul>"


def test_existing_indentation_is_replaced():
    source = "        <div>\n  x\n            </div>"

    assert apply_indentation(source, "  ") == "<div>\n  x\n</div>"


def test_template_blocks_with_middle_keyword():
    source = _doc(
        """
        {{if x}}
        <b>y</b>
        {{else}}
        z
        {{end}}
        """
    )

    assert apply_indentation(source, "\t") == (
        "{{ if x }}\n\t<b>y</b>\n{{ else }}\n\tz\n{{ end }}"
    )


def test_case_when_blocks():
    source = _doc(
        """
        {{ case kind }}
        {{ when "a" }}
        <p>A</p>
        {{ when "b" }}
        <p>B</p>
        {{ end }}
        """
    )

    assert apply_indentation(source, "\t") == (
        '{{ case kind }}\n{{ when "a" }}\n\t<p>A</p>\n{{ when "b" }}\n\t<p>B</p>\n{{ end }}'
    )


def test_markup_and_template_nesting_combine():
    source = _doc(
        """
        <ul>
        {{ for item in items }}
        <li>
        {{ item.name }}
        </li>
        {{ end }}
        </ul>
        """
    )

    assert apply_indentation(source, "  ") == (
        "<ul>\n"
        "  {{ for item in items }}\n"
        "    <li>\n"
        "      {{ item.name }}\n"
        "    </li>\n"
        "  {{ end }}\n"
        "</ul>"
    )


def test_void_elements_do_not_indent():
    source = _doc(
        """
        <div>
        <img src="a">
        <p>x</p>
        <br>
        <hr/>
        <p>y</p>
        </div>
        """
    )

    assert apply_indentation(source, "\t") == (
        '<div>\n\t<img src="a">\n\t<p>x</p>\n\t<br>\n\t<hr/>\n\t<p>y</p>\n</div>'
    )


def test_leading_closers_dedent_current_line_only():
    source = _doc(
        """
        <section>
        <div>
        <div>
        x
        </div></div>
        y
        </section>
        """
    )

    assert apply_indentation(source, "\t") == (
        "<section>\n\t<div>\n\t\t<div>\n\t\t\tx\n\t</div></div>\n\ty\n</section>"
    )


def test_same_line_open_and_close_does_not_drift():
    source = _doc(
        """
        <div>
        <p>{{ if a }}<b>{{ name }}</b>{{ end }}</p>
        <p>next</p>
        </div>
        """
    )

    lines = apply_indentation(source, "\t").split("\n")

    assert lines[2] == "\t<p>next</p>"
    assert lines[3] == "</div>"


def test_multi_line_tag_continuation_and_close():
    source = _doc(
        """
        <div>
        {{
        x = 1
        y = 2
        }}
        <p>after</p>
        </div>
        """
    )

    assert apply_indentation(source, "\t") == (
        "<div>\n\t{{\n\t\tx = 1\n\t\ty = 2\n\t}}\n\t<p>after</p>\n</div>"
    )


def test_multi_line_tag_with_trim_markers():
    source = _doc(
        """
        {{~
        func greet(name)
        ret "hi " + name
        end
        ~}}
        <p>{{ greet "a" }}</p>
        """
    )

    assert apply_indentation(source, "  ") == (
        '{{~\n  func greet(name)\n  ret "hi " + name\n  end\n~}}\n<p>{{ greet "a" }}</p>'
    )


def test_multi_line_block_opener():
    source = _doc(
        """
        <div>
        {{ if x &&
        y }}
        <p>a</p>
        {{ end }}
        </div>
        """
    )

    assert apply_indentation(source, "\t") == (
        "<div>\n\t{{ if x &&\n\t\t\ty }}\n\t\t<p>a</p>\n\t{{ end }}\n</div>"
    )


def test_blank_lines_are_emptied_and_keep_state():
    source = "<div>\n\n   \nx\n</div>"

    assert apply_indentation(source, "\t") == "<div>\n\n\n\tx\n</div>"


def test_indent_level_never_negative():
    source = "</div>\n</div>\n{{ end }}\nx"

    assert apply_indentation(source, "\t") == "</div>\n</div>\n{{ end }}\nx"


def test_unterminated_tag_keeps_offset():
    source = "{{ if x\n<p>a</p>\n<p>b</p>"

    assert apply_indentation(source, " ") == "{{ if x\n  <p>a</p>\n  <p>b</p>"


def test_crlf_lines_are_joined_with_newlines():
    assert apply_indentation("<div>\r\nx\r\n</div>", "\t") == "<div>\n\tx\n</div>"


def test_indent_line_threads_state():
    state = IndentState()

    assert indent_line("<div>", state, "-") == "<div>"
    assert state.indent_level == 1

    assert indent_line("{{ if x", state, "-") == "-{{ if x"
    assert state.tag_state.in_scriban_tag is True
    assert state.block_open_indents == [1]
    assert state.indent_level == 2

    assert indent_line("}}", state, "-") == "-}}"
    assert state.tag_state.in_scriban_tag is False
    assert state.block_open_indents == []
    assert state.indent_level == 2


def test_indent_line_blank_line_leaves_state():
    state = IndentState(indent_level=3)

    assert indent_line("   ", state, "\t") == ""
    assert state.indent_level == 3


def test_documents_do_not_share_state():
    apply_indentation("<div>\n<div>\n{{ if x", "\t")

    assert apply_indentation("<p>a</p>", "\t") == "<p>a</p>"


def test_is_closing_only_line():
    assert is_closing_only_line("}}")
    assert is_closing_only_line("~}}")
    assert is_closing_only_line("- }}")
    assert not is_closing_only_line("y }}")
    assert not is_closing_only_line("}} <p>")
