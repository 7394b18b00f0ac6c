"""Data models for scriban-indent."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class SegmentKind(Enum):
    """Block role of a template segment, decided by its leading keyword.

    Attributes:
        OPEN: Starts a block (``if``, ``for``, ``case``, ``while``, ``capture``, ``wrap``).
        MIDDLE: Splits a block (``else``, ``elsif``, ``when``).
        CLOSE: Ends a block (``end``).
        NONE: Any other expression or statement.
    """

    OPEN = auto()
    MIDDLE = auto()
    CLOSE = auto()
    NONE = auto()


@dataclass
class ScribanTagState:
    """Carry state between lines while scanning template tags.

    Attributes:
        in_scriban_tag: True while a ``{{`` has been seen without its ``}}``.
    """

    in_scriban_tag: bool = False


@dataclass
class IndentState:
    """Encapsulate the indentation engine state while walking a document.

    Attributes:
        indent_level: Running nesting depth, never negative.
        tag_state: Multi-line template tag carry state.
        block_open_indents: Indent counts of lines that opened a multi-line tag,
            reused when the matching ``}}`` line is emitted.
    """

    indent_level: int = 0
    tag_state: ScribanTagState = field(default_factory=ScribanTagState)
    block_open_indents: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class SegmentCounts:
    """Block keyword counts over the segments of one line."""

    open_count: int = 0
    middle_count: int = 0
    close_count: int = 0


@dataclass(frozen=True)
class MarkupCounts:
    """Markup tag counts for one line with template text removed.

    Attributes:
        opening_tags: Opening tags that require a closing tag.
        closing_tags: All closing tags on the line.
        leading_closings: Closing tags found contiguously at the start of the line.
    """

    opening_tags: int = 0
    closing_tags: int = 0
    leading_closings: int = 0

    @property
    def remaining_closings(self) -> int:
        return max(0, self.closing_tags - self.leading_closings)


@dataclass
class ProtectedText:
    """Text with opaque regions swapped out for placeholder tokens.

    Attributes:
        text: Document text containing the tokens.
        prefix: Token prefix; token ``i`` is ``f"{prefix}{i}__"``.
        values: Original content for each token, in insertion order.
    """

    text: str
    prefix: str
    values: list[str] = field(default_factory=list)

    def token(self, index: int) -> str:
        return f"{self.prefix}{index}__"

    @property
    def tokens(self) -> list[str]:
        return [self.token(index) for index in range(len(self.values))]


@dataclass(frozen=True)
class DocumentEdit:
    """Whole-document replacement handed back to the host.

    Attributes:
        start_line: Zero-based first line of the replaced range.
        start_character: Column where the replaced range starts.
        end_line: Zero-based last line of the replaced range.
        end_character: Column where the replaced range ends.
        new_text: Replacement text.
    """

    start_line: int
    start_character: int
    end_line: int
    end_character: int
    new_text: str
