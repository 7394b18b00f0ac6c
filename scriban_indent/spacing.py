"""Spacing normalization for Scriban template tags."""

from __future__ import annotations

import re

from .constants import ISOLATED_CLOSER_PATTERN, ISOLATED_OPENER_PATTERN, TAG_PATTERN


def _normalize_tag(match: re.Match[str]) -> str:
    open_marker = match.group(1) or ""
    inner = (match.group(2) or "").strip()
    close_marker = match.group(3) or ""
    if not inner:
        return f"{{{{{open_marker}{close_marker}}}}}"
    return f"{{{{{open_marker} {inner} {close_marker}}}}}"


def normalize_tag_spacing(line: str) -> str:
    """Put exactly one space between tag delimiters and their content.

    Every ``{{[~-]? ... [~-]?}}`` tag on the line is rewritten independently.
    Tags with empty content collapse to ``{{}}`` (keeping trim markers). A line
    that is only an isolated opener (``{{``, ``{{~``, ``{{-``) or closer
    (``}}``, ``~}}``, ``-}}``) marks a multi-line tag boundary and is returned
    trimmed without further rewriting.

    Args:
        line: A single line of the document.

    Returns:
        str: The line with normalized tag spacing.

    Examples:
        normalize_tag_spacing("{{x}}")  # "{{ x }}"
        normalize_tag_spacing("{{~x~}}")  # "{{~ x ~}}"
        normalize_tag_spacing("{{  }}")  # "{{}}"
    """
    trimmed = line.strip()

    if ISOLATED_OPENER_PATTERN.fullmatch(trimmed):
        return trimmed

    if ISOLATED_CLOSER_PATTERN.fullmatch(trimmed):
        return trimmed

    return TAG_PATTERN.sub(_normalize_tag, line)


def normalize_block_content(inner: str) -> str:
    """Normalize the body of a ``<style>`` block that holds template tags.

    Lines are trimmed, blank lines dropped and tag spacing normalized; the
    result is joined with ``\\n`` so the indentation engine can re-indent it.

    Examples:
        normalize_block_content("\\n  .a { color: {{c}}; }\\n\\n")  # ".a { color: {{ c }}; }"
    """
    lines = (line.strip() for line in re.split(r"\r?\n", inner))
    return "\n".join(normalize_tag_spacing(line) for line in lines if line)
