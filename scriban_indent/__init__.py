"""
scriban-indent: formatter for HTML templates with embedded Scriban tags.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    scriban-indent templates/page.sbnhtml

Library Usage:
    from scriban_indent import FormatConfig, format_document

    formatted = format_document(source, FormatConfig(indent_spaces=2))
"""

from .config import ConfigError, FormatConfig, get_indent_unit
from .exceptions import FormatError, PlaceholderMismatchError, ReformatterError
from .formatter import compute_edit, format_document
from .indent import apply_indentation, indent_line
from .markup import analyze_markup_line
from .models import DocumentEdit, IndentState, ScribanTagState, SegmentKind
from .reformatter import ReformatOptions, prettify_markup
from .segments import analyze_segments, classify_segment, extract_segments
from .spacing import normalize_tag_spacing

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "format_document",
    "compute_edit",
    "apply_indentation",
    "indent_line",
    "normalize_tag_spacing",
    "extract_segments",
    "classify_segment",
    "analyze_segments",
    "analyze_markup_line",
    "prettify_markup",
    # Data models
    "DocumentEdit",
    "IndentState",
    "ScribanTagState",
    "SegmentKind",
    "ReformatOptions",
    # Configuration
    "FormatConfig",
    "get_indent_unit",
    # Exceptions
    "ConfigError",
    "FormatError",
    "PlaceholderMismatchError",
    "ReformatterError",
    # Version
    "__version__",
]
