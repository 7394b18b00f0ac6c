import pytest

from scriban_indent.markup import analyze_markup_line, count_leading_closings
from scriban_indent.models import MarkupCounts


def test_leading_closings_dedent_the_line():
    counts = analyze_markup_line("</div></div>")

    assert counts == MarkupCounts(opening_tags=0, closing_tags=2, leading_closings=2)
    assert counts.remaining_closings == 0


def test_trailing_closings_are_remaining():
    counts = analyze_markup_line("<div><span>x</span>")

    assert counts == MarkupCounts(opening_tags=2, closing_tags=1, leading_closings=0)
    assert counts.remaining_closings == 1


@pytest.mark.parametrize(
    "line",
    [
        '<img src="a">',
        "<br>",
        "<BR>",
        '<input type="text" name="q">',
        '<meta charset="utf-8">',
        "<br/>",
        '<my-widget data-x="1" />',
        "<!-- comment -->",
        "<!DOCTYPE html>",
        "<?xml version='1.0'?>",
    ],
)
def test_non_container_tags_do_not_open(line):
    assert analyze_markup_line(line).opening_tags == 0


def test_template_tags_are_ignored():
    counts = analyze_markup_line("<p>{{ if a > b }}</p>")

    assert counts == MarkupCounts(opening_tags=1, closing_tags=1, leading_closings=0)


def test_template_tag_inside_attribute():
    counts = analyze_markup_line('<div class="{{ cls }}">')

    assert counts == MarkupCounts(opening_tags=1, closing_tags=0, leading_closings=0)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("</li></ul>", 2),
        ("  </li></ul> text", 2),
        ("</li> </ul>", 1),
        ("</ul>text</p>", 1),
        ("text</p>", 0),
        ("", 0),
    ],
)
def test_count_leading_closings(line, expected):
    assert count_leading_closings(line) == expected


def test_closing_tags_counted_anywhere():
    counts = analyze_markup_line("</li> <li>next</li>")

    assert counts == MarkupCounts(opening_tags=1, closing_tags=2, leading_closings=1)
    assert counts.remaining_closings == 1
