"""Formatting pipeline for HTML documents with embedded Scriban templates."""

from __future__ import annotations

import logging
import re

from .config import FormatConfig, get_indent_unit, validate_config
from .exceptions import FormatError
from .indent import apply_indentation
from .models import DocumentEdit
from .protect import (
    protect_style_blocks,
    protect_tags,
    restore,
    restore_attribute_quotes,
    verify_placeholders,
)
from .reformatter import MarkupReformatter, ReformatOptions, prettify_markup, run_reformatter

logger = logging.getLogger(__name__)


def format_document(
    text: str,
    config: FormatConfig | None = None,
    reformatter: MarkupReformatter | None = None,
) -> str:
    """Format a Scriban HTML document.

    Style blocks holding template tags and then every template tag are
    replaced by placeholder tokens, the markup reformatter lays out the
    remaining markup, the protected content is restored, and finally the
    indentation engine re-indents every line. A reformatter that fails or
    loses a placeholder is ignored and the pipeline continues with the
    unformatted markup. Attribute values holding template tags keep the quote
    character they were written with.

    Args:
        text: Original document text.
        config: Formatting configuration; defaults to a new `FormatConfig`.
        reformatter: Markup reformatter; defaults to `prettify_markup`.

    Returns:
        str: The formatted document.

    Raises:
        ConfigError: If the configuration fails validation.

    Examples:
        format_document("<div>{{if show}}<b>x</b>{{end}}</div>", FormatConfig(markup_formatter=False))
    """
    config = config or FormatConfig()
    validate_config(config)
    reformatter = reformatter or prettify_markup

    protected_styles = protect_style_blocks(text)
    protected_tags = protect_tags(protected_styles.text)

    markup = protected_tags.text
    if config.markup_formatter:
        reformatted = run_reformatter(markup, reformatter, ReformatOptions())
        try:
            verify_placeholders(reformatted, protected_tags)
            verify_placeholders(reformatted, protected_styles)
            reformatted = restore_attribute_quotes(markup, reformatted, protected_tags)
        except FormatError as error:
            logger.warning("Discarding reformatted markup: %s", error)
        else:
            markup = reformatted

    restored = restore(markup, protected_tags)
    restored = restore(restored, protected_styles)
    return apply_indentation(restored, get_indent_unit(config))


def compute_edit(
    original: str,
    config: FormatConfig | None = None,
    reformatter: MarkupReformatter | None = None,
) -> DocumentEdit | None:
    """Compute the edit a host should apply to a document.

    Returns:
        DocumentEdit | None: A replacement spanning the whole document, or None
            when formatting leaves the text unchanged.

    Examples:
        compute_edit("{{ x }}", FormatConfig(markup_formatter=False))  # None
    """
    formatted = format_document(original, config, reformatter)
    if formatted == original:
        logger.debug("Document already formatted")
        return None

    lines = re.split(r"\r?\n", original)
    return DocumentEdit(
        start_line=0,
        start_character=0,
        end_line=len(lines) - 1,
        end_character=len(lines[-1]),
        new_text=formatted,
    )
