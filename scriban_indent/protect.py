"""Placeholder protection for regions the markup reformatter must not touch."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from .constants import (
    ANY_TAG_PATTERN,
    ATTRIBUTE_VALUE_PATTERN,
    QUOTED_START_TAG_PATTERN,
    STYLE_BLOCK_PATTERN,
    STYLE_PLACEHOLDER_PREFIX,
    TAG_PLACEHOLDER_PREFIX,
)
from .exceptions import PlaceholderMismatchError, ReformatterError
from .models import ProtectedText
from .spacing import normalize_block_content

logger = logging.getLogger(__name__)


def unique_prefix(text: str, base: str) -> str:
    """Pick a placeholder prefix that does not already occur in `text`.

    Examples:
        unique_prefix("plain", "__scriban_tag_")  # "__scriban_tag_"
        unique_prefix("__scriban_tag_0__", "__scriban_tag_")  # "__scriban_tag_1_"
    """
    prefix = base
    suffix = 0
    while prefix in text:
        suffix += 1
        prefix = f"{base}{suffix}_"
    return prefix


def protect_pattern(
    text: str,
    pattern: re.Pattern[str],
    base_prefix: str,
    replace: Callable[[re.Match[str], str], tuple[str, str] | None] | None = None,
) -> ProtectedText:
    """Swap every match of `pattern` for an indexed placeholder token.

    Args:
        text: Text to protect.
        pattern: Regions to protect.
        base_prefix: Preferred token prefix, extended when it collides with `text`.
        replace: Optional callable ``(match, token) -> (replacement, stored_value)``;
            by default the whole match is replaced and stored verbatim.

    Returns:
        ProtectedText: Protected text and the stored values in insertion order.
    """
    protected = ProtectedText(text="", prefix=unique_prefix(text, base_prefix))

    def substitute(match: re.Match[str]) -> str:
        token = protected.token(len(protected.values))
        if replace is None:
            protected.values.append(match.group(0))
            return token
        result = replace(match, token)
        if result is None:
            return match.group(0)
        replacement, value = result
        protected.values.append(value)
        return replacement

    protected.text = pattern.sub(substitute, text)
    return protected


def protect_tags(text: str) -> ProtectedText:
    """Replace every ``{{ ... }}`` tag, including multi-line ones, with a token.

    Examples:
        protect_tags("<p>{{ x }}</p>").text  # "<p>__scriban_tag_0__</p>"
    """
    protected = protect_pattern(text, ANY_TAG_PATTERN, TAG_PLACEHOLDER_PREFIX)
    logger.debug("Protected %d template tags", len(protected.values))
    return protected


def _protect_style_body(match: re.Match[str], token: str) -> tuple[str, str] | None:
    attrs, inner = match.group(1), match.group(2)
    if "{{" not in inner or "}}" not in inner:
        return None
    return f"<style{attrs}>\n{token}\n</style>", normalize_block_content(inner)


def protect_style_blocks(text: str) -> ProtectedText:
    """Replace the body of each ``<style>`` block holding template tags with a token.

    The stored body is already normalized (trimmed lines, blank lines dropped,
    tag spacing fixed). Style blocks without template tags are left alone.

    Examples:
        protect_style_blocks("<style>a{c:{{x}}}</style>").text
        # "<style>\\n__scriban_style_block_0__\\n</style>"
    """
    protected = protect_pattern(
        text, STYLE_BLOCK_PATTERN, STYLE_PLACEHOLDER_PREFIX, replace=_protect_style_body
    )
    logger.debug("Protected %d style blocks", len(protected.values))
    return protected


def verify_placeholders(text: str, protected: ProtectedText) -> None:
    """Ensure every token of `protected` occurs exactly once in `text`.

    Raises:
        PlaceholderMismatchError: If a token is missing or duplicated.
    """
    for token in protected.tokens:
        count = text.count(token)
        if count != 1:
            raise PlaceholderMismatchError(token, count)


def restore(text: str, protected: ProtectedText) -> str:
    """Put the protected values back, replacing each token's first occurrence in order.

    Examples:
        protected = protect_tags("<p>{{x}}</p>")
        restore(protected.text, protected)  # "<p>{{x}}</p>"
    """
    output = text
    for token, value in zip(protected.tokens, protected.values):
        output = output.replace(token, value, 1)
    return output


def _attribute_quotes(text: str, protected: ProtectedText) -> dict[str, str]:
    token_pattern = re.compile(re.escape(protected.prefix) + r"\d+__")
    quotes = {}
    for tag in QUOTED_START_TAG_PATTERN.finditer(text):
        for attribute in ATTRIBUTE_VALUE_PATTERN.finditer(tag.group(0)):
            for token in token_pattern.findall(attribute.group(3)):
                quotes[token] = attribute.group(2)
    return quotes


def restore_attribute_quotes(source: str, output: str, protected: ProtectedText) -> str:
    """Re-quote attribute values holding tokens the way `source` quoted them.

    Markup serializers pick their own quote character, but a token may stand
    for a template tag containing that very character, e.g.
    ``title='{{ "hi" }}'``. Values that hold a token get back the quote they
    had in `source`.

    Raises:
        ReformatterError: If the value cannot take its original quote because
            the serializer left that character inside it.

    Examples:
        protected = protect_tags("<a title='{{ \\"hi\\" }}'>")
        restore_attribute_quotes(protected.text, '<a title="__scriban_tag_0__">', protected)
        # "<a title='__scriban_tag_0__'>"
    """
    expected = _attribute_quotes(source, protected)
    if not expected:
        return output

    token_pattern = re.compile(re.escape(protected.prefix) + r"\d+__")

    def requote(attribute: re.Match[str]) -> str:
        separator, quote, value = attribute.groups()
        wanted = {expected[token] for token in token_pattern.findall(value) if token in expected}
        if len(wanted) != 1 or quote in wanted:
            return attribute.group(0)
        original_quote = wanted.pop()
        if original_quote in value:
            raise ReformatterError(
                f"Cannot restore {original_quote} quoting of attribute value {value!r}"
            )
        return f"{separator}{original_quote}{value}{original_quote}"

    return QUOTED_START_TAG_PATTERN.sub(
        lambda tag: ATTRIBUTE_VALUE_PATTERN.sub(requote, tag.group(0)), output
    )
