"""Markup tag nesting analysis."""

from __future__ import annotations

from .constants import CLOSING_TAG_PATTERN, MARKUP_TAG_PATTERN, TAG_NAME_PATTERN, VOID_ELEMENTS
from .models import MarkupCounts
from .segments import strip_scriban_tags


def count_leading_closings(text: str) -> int:
    """Count closing tags that appear back to back at the start of `text`.

    Leading whitespace is ignored; counting stops at the first token that is
    not a closing tag.

    Examples:
        count_leading_closings("  </li></ul> text")  # 2
        count_leading_closings("</li> </ul>")  # 1
    """
    trimmed = text.lstrip()
    count = 0
    position = 0

    while position < len(trimmed):
        closing_match = CLOSING_TAG_PATTERN.match(trimmed, position)
        if not closing_match:
            break
        count += 1
        position = closing_match.end()

    return count


def _is_opening_tag(tag: str) -> bool:
    if tag.startswith("<!") or tag.startswith("<?"):
        return False
    if tag.endswith("/>"):
        return False
    name_match = TAG_NAME_PATTERN.match(tag)
    tag_name = name_match.group(1).lower() if name_match else ""
    return tag_name not in VOID_ELEMENTS


def analyze_markup_line(line: str) -> MarkupCounts:
    """Count the markup tags on a line, ignoring template tags.

    Args:
        line: Line that may mix markup and ``{{ ... }}`` template tags.

    Returns:
        MarkupCounts: Opening tags (without void, self-closing, comment and
            processing-instruction tags), all closing tags, and the closing tags
            that lead the line.

    Examples:
        analyze_markup_line("</div></div>")  # MarkupCounts(0, 2, 2)
        analyze_markup_line('<img src="a">')  # MarkupCounts(0, 0, 0)
        analyze_markup_line("<p>{{ name }}</p>")  # MarkupCounts(1, 1, 0)
    """
    without_scriban = strip_scriban_tags(line)
    opening_tags = 0
    closing_tags = 0

    for match in MARKUP_TAG_PATTERN.finditer(without_scriban):
        tag = match.group(0)
        if tag.startswith("</"):
            closing_tags += 1
        elif _is_opening_tag(tag):
            opening_tags += 1

    return MarkupCounts(
        opening_tags=opening_tags,
        closing_tags=closing_tags,
        leading_closings=count_leading_closings(without_scriban),
    )
