"""Template segment extraction and block keyword classification."""

from __future__ import annotations

from .constants import (
    ANY_TAG_PATTERN,
    CLOSE_KEYWORD_PATTERN,
    MIDDLE_KEYWORD_PATTERN,
    OPEN_KEYWORD_PATTERN,
    SEGMENT_EDGE_CHARS,
)
from .models import ScribanTagState, SegmentCounts, SegmentKind


def _clean_segment(segment: str) -> str:
    return segment.strip(SEGMENT_EDGE_CHARS)


def strip_scriban_tags(line: str) -> str:
    """Remove every complete ``{{ ... }}`` tag from a line.

    Examples:
        strip_scriban_tags("<p>{{ name }}</p>")  # "<p></p>"
    """
    return ANY_TAG_PATTERN.sub("", line)


def extract_segments(line: str, state: ScribanTagState) -> list[str]:
    """Extract the inner text of each template tag occurrence on a line.

    Scans left to right, alternating between looking for ``{{`` and ``}}``.
    When `state` says a tag is already open, scanning resumes inside it. If
    the line ends inside a tag, the remainder is returned as an open segment
    and `state` is left marked as inside a tag for the next line.

    Args:
        line: Line to scan.
        state: Carry state shared between consecutive lines; updated in place.

    Returns:
        list[str]: Segments stripped of whitespace and ``~``/``-`` trim markers.

    Examples:
        extract_segments("{{ if x }}<b>{{ y }}", ScribanTagState())  # ["if x", "y"]
        extract_segments("a }}{{ end", ScribanTagState(in_scriban_tag=True))  # ["a", "end"]
    """
    segments = []
    index = 0
    in_tag = state.in_scriban_tag

    while index < len(line):
        if not in_tag:
            start = line.find("{{", index)
            if start == -1:
                break
            index = start + 2
            in_tag = True
            continue

        end = line.find("}}", index)
        if end == -1:
            segments.append(line[index:])
            index = len(line)
            break
        segments.append(line[index:end])
        index = end + 2
        in_tag = False

    state.in_scriban_tag = in_tag
    return [_clean_segment(segment) for segment in segments]


def classify_segment(segment: str) -> SegmentKind:
    """Classify a segment by its leading keyword.

    Only the first token counts, so ``end`` inside an expression such as
    ``x.end()`` or a lambda body does not close a block.

    Examples:
        classify_segment("end")  # SegmentKind.CLOSE
        classify_segment("elsif x > 1")  # SegmentKind.MIDDLE
        classify_segment("for item in items")  # SegmentKind.OPEN
        classify_segment("x.end()")  # SegmentKind.NONE
    """
    text = _clean_segment(segment).lower()
    if CLOSE_KEYWORD_PATTERN.match(text):
        return SegmentKind.CLOSE
    if MIDDLE_KEYWORD_PATTERN.match(text):
        return SegmentKind.MIDDLE
    if OPEN_KEYWORD_PATTERN.match(text):
        return SegmentKind.OPEN
    return SegmentKind.NONE


def analyze_segments(segments: list[str]) -> SegmentCounts:
    """Count opening, middle and closing block keywords over a line's segments."""
    kinds = [classify_segment(segment) for segment in segments]
    return SegmentCounts(
        open_count=kinds.count(SegmentKind.OPEN),
        middle_count=kinds.count(SegmentKind.MIDDLE),
        close_count=kinds.count(SegmentKind.CLOSE),
    )
