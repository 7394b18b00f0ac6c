"""External markup reformatter and its guarded call site."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from bs4 import BeautifulSoup
from bs4.formatter import HTMLFormatter

from .constants import (
    CHARACTER_REFERENCE_PATTERN,
    END_TAG_NAME_PATTERN,
    ENTITY_PLACEHOLDER_PREFIX,
    START_TAG_NAME_PATTERN,
)
from .exceptions import ReformatterError
from .protect import protect_pattern, restore, verify_placeholders

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReformatOptions:
    """Layout options passed to the markup reformatter.

    Attributes:
        indent_size: Indent width when `use_tabs` is False.
        use_tabs: Indent with one tab per level.
    """

    indent_size: int = 1
    use_tabs: bool = True


MarkupReformatter = Callable[[str, ReformatOptions], str]


def _tag_names(text: str) -> tuple[list[str], list[str]]:
    starts = [name.lower() for name in START_TAG_NAME_PATTERN.findall(text)]
    ends = [name.lower() for name in END_TAG_NAME_PATTERN.findall(text)]
    return starts, ends


def prettify_markup(text: str, options: ReformatOptions | None = None) -> str:
    """Lay out markup one node per line using BeautifulSoup.

    Character references and bare ampersands are shielded so the parser does
    not decode them. The parser closes unclosed elements and drops stray end
    tags; when that happens the tag sequence changes and the result is refused.

    Args:
        text: Markup, typically with template tags already replaced by tokens.
        options: Indentation options; defaults to one tab per level.

    Returns:
        str: The reformatted markup.

    Raises:
        ReformatterError: If the parser added or removed tags.
        PlaceholderMismatchError: If a shielded character reference was lost.

    Examples:
        prettify_markup("<ul><li>a</li></ul>")  # "<ul>\\n\\t<li>\\n\\t\\ta\\n\\t</li>\\n</ul>\\n"
    """
    options = options or ReformatOptions()
    if not text.strip():
        return text

    entities = protect_pattern(text, CHARACTER_REFERENCE_PATTERN, ENTITY_PLACEHOLDER_PREFIX)
    soup = BeautifulSoup(entities.text, "html.parser")
    formatter = HTMLFormatter(
        void_element_close_prefix=None,
        empty_attributes_are_booleans=True,
        indent="\t" if options.use_tabs else options.indent_size,
    )
    output = soup.prettify(formatter=formatter)

    if _tag_names(output) != _tag_names(entities.text):
        raise ReformatterError("Markup parser changed the tag structure of the document")

    verify_placeholders(output, entities)
    return restore(output, entities)


def run_reformatter(
    text: str, reformatter: MarkupReformatter, options: ReformatOptions | None = None
) -> str:
    """Call the reformatter, falling back to `text` when it fails.

    Any exception raised by the reformatter is logged and swallowed so that
    formatting never destroys the document.
    """
    options = options or ReformatOptions()
    try:
        return reformatter(text, options)
    except Exception as error:
        logger.warning("Markup reformatter failed, falling back to unformatted text: %s", error)
        return text
