"""Indentation engine merging markup and template block nesting."""

from __future__ import annotations

import logging
import re

from .constants import CLOSING_ONLY_PATTERN
from .markup import analyze_markup_line
from .models import IndentState
from .segments import analyze_segments, extract_segments
from .spacing import normalize_tag_spacing

logger = logging.getLogger(__name__)


def is_closing_only_line(line: str) -> bool:
    """Return True when the line is just a multi-line tag closer (``}}``, ``~}}``, ``-}}``)."""
    return CLOSING_ONLY_PATTERN.fullmatch(line) is not None


def indent_line(line: str, state: IndentState, indent_unit: str) -> str:
    """Render one line at its indent and advance the engine state.

    Template closers and middles, plus closing tags that lead the line, dedent
    before the line is rendered. Openers, middles and opening tags indent the
    following line, minus closing tags that trail on the same line.
    Continuation lines of a multi-line tag get one extra level, and the
    closing ``}}`` line is aligned with the line that opened the tag.

    Args:
        line: Raw line, with or without indentation.
        state: Engine state carried between lines; updated in place.
        indent_unit: String emitted once per indent level.

    Returns:
        str: The indented, spacing-normalized line, or ``""`` for a blank line.

    Examples:
        state = IndentState()
        indent_line("<div>", state, "  ")  # "<div>"
        indent_line("{{if x}}", state, "  ")  # "  {{ if x }}"
    """
    trimmed = line.strip()
    if not trimmed:
        return ""

    normalized = normalize_tag_spacing(trimmed)

    was_in_scriban_tag = state.tag_state.in_scriban_tag
    segments = extract_segments(normalized, state.tag_state)
    scriban = analyze_segments(segments)
    markup = analyze_markup_line(normalized)

    pre_decrease = scriban.close_count + scriban.middle_count + markup.leading_closings
    state.indent_level = max(state.indent_level - pre_decrease, 0)

    closing_only = is_closing_only_line(normalized)
    tag_indent_offset = 1 if was_in_scriban_tag and not closing_only else 0
    indent_count = state.indent_level + tag_indent_offset

    # A multi-line tag closes at the indent of the line that opened it
    if closing_only and state.block_open_indents:
        indent_count = state.block_open_indents.pop()

    if not was_in_scriban_tag and state.tag_state.in_scriban_tag:
        state.block_open_indents.append(indent_count)

    state.indent_level = max(
        state.indent_level
        + scriban.open_count
        + scriban.middle_count
        + markup.opening_tags
        - markup.remaining_closings,
        0,
    )

    return indent_unit * indent_count + normalized


def apply_indentation(text: str, indent_unit: str) -> str:
    """Re-indent a whole document line by line.

    Each call owns a fresh `IndentState`, so documents never share state.

    Args:
        text: Document text; lines are split on ``\\n`` or ``\\r\\n``.
        indent_unit: String emitted once per indent level.

    Returns:
        str: The re-indented document joined with ``\\n``.

    Examples:
        apply_indentation("<ul>\\n<li>a</li>\\n</ul>", "\\t")  # "<ul>\\n\\t<li>a</li>\\n</ul>"
    """
    state = IndentState()
    lines = re.split(r"\r?\n", text)
    output = [indent_line(line, state, indent_unit) for line in lines]

    if state.tag_state.in_scriban_tag or state.indent_level:
        logger.debug(
            "Document ended at indent level %d (inside tag: %s)",
            state.indent_level,
            state.tag_state.in_scriban_tag,
        )

    return "\n".join(output)
