"""Constants used across the scriban-indent package."""

from __future__ import annotations

import re

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_TABS_PER_INDENT = 2

TEMPLATE_EXTENSIONS = (
    ".html",
    ".htm",
    ".scriban",
    ".sbn",
    ".sbnhtml",
    ".scriban-html",
    ".sbn-html",
)

# Elements that never take a closing tag
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Scriban patterns
TAG_PATTERN = re.compile(r"\{\{([~-])?([\s\S]*?)([~-])?\}\}")
ANY_TAG_PATTERN = re.compile(r"\{\{[\s\S]*?\}\}")
ISOLATED_OPENER_PATTERN = re.compile(r"\{\{[~-]?")
ISOLATED_CLOSER_PATTERN = re.compile(r"[~-]?\}\}")
CLOSING_ONLY_PATTERN = re.compile(r"\s*[-~]?\s*\}\}")
SEGMENT_EDGE_CHARS = " \t\n\r\f\v~-"

# Keywords only count when they lead the segment
CLOSE_KEYWORD_PATTERN = re.compile(r"\s*end\b")
MIDDLE_KEYWORD_PATTERN = re.compile(r"\s*(else|elsif|when)\b")
OPEN_KEYWORD_PATTERN = re.compile(r"\s*(if|for|case|while|capture|wrap)\b")

# Markup patterns
MARKUP_TAG_PATTERN = re.compile(r"</?[a-zA-Z][^>]*>")
CLOSING_TAG_PATTERN = re.compile(r"</[a-zA-Z][^>]*>")
TAG_NAME_PATTERN = re.compile(r"<\s*([a-zA-Z0-9:-]+)")
STYLE_BLOCK_PATTERN = re.compile(r"<style\b([^>]*)>([\s\S]*?)</style>", re.IGNORECASE)

# Placeholder prefixes stay lowercase so html.parser leaves them intact in
# attribute names; a numeric suffix is appended when the prefix occurs in the document
TAG_PLACEHOLDER_PREFIX = "__scriban_tag_"
STYLE_PLACEHOLDER_PREFIX = "__scriban_style_block_"
ENTITY_PLACEHOLDER_PREFIX = "__scriban_entity_"

# Character references plus any bare ampersand
CHARACTER_REFERENCE_PATTERN = re.compile(
    r"&(?:[a-zA-Z][a-zA-Z0-9]*|#[0-9]+|#[xX][0-9a-fA-F]+);|&"
)
START_TAG_NAME_PATTERN = re.compile(r"<([a-zA-Z][a-zA-Z0-9:_.-]*)")
END_TAG_NAME_PATTERN = re.compile(r"</([a-zA-Z][a-zA-Z0-9:_.-]*)")

# Start tags with quoted attribute values, which may contain ">"
QUOTED_START_TAG_PATTERN = re.compile(r"""<[a-zA-Z](?:[^>"']|"[^"]*"|'[^']*')*>""")
ATTRIBUTE_VALUE_PATTERN = re.compile(r"""(=\s*)(["'])(.*?)\2""", re.DOTALL)
