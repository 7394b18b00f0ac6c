"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_MAX_FILE_SIZE, DEFAULT_TABS_PER_INDENT


@dataclass
class FormatConfig:
    """Configuration for formatting Scriban HTML templates.

    Attributes:
        tabs_per_indent: Number of tabs emitted per indent level.
        indent_spaces: Number of spaces per indent level; overrides
            `tabs_per_indent` when set.
        markup_formatter: Whether to run the markup reformatter before
            indenting.
        max_file_size: Maximum file size in bytes that will be processed.

    Examples:
        FormatConfig(tabs_per_indent=1, markup_formatter=False)
    """

    # Indentation
    tabs_per_indent: int = DEFAULT_TABS_PER_INDENT
    indent_spaces: int | None = None

    # Pipeline
    markup_formatter: bool = True

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`tabs_per_indent` must be >= 1")
    """


def load_config(search_path: Path) -> FormatConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.scriban-indent]`` table from `pyproject.toml` and the
    ``[scriban-indent]`` or ``[tool.scriban-indent]`` table from
    `.scriban-indent.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("templates"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "scriban-indent")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".scriban-indent.toml",
            table_paths=[("scriban-indent",), ("tool", "scriban-indent")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FormatConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> FormatConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> FormatConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return FormatConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys may use dashes
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}

    try:
        return FormatConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: FormatConfig) -> None:
    """Validate a `FormatConfig` instance.

    Raises:
        ConfigError: If indentation settings are not positive integers, the
            markup formatter flag is not a boolean, or the size limit is not
            a positive integer.

    Examples:
        validate_config(FormatConfig(tabs_per_indent=1))
    """
    _ensure_integers(
        {
            "tabs_per_indent": config.tabs_per_indent,
            "max_file_size": config.max_file_size,
            **({"indent_spaces": config.indent_spaces} if config.indent_spaces is not None else {}),
        }
    )

    if config.tabs_per_indent < 1:
        raise ConfigError("`tabs_per_indent` must be >= 1")
    if config.indent_spaces is not None and config.indent_spaces <= 0:
        raise ConfigError("`indent_spaces` must be a positive integer")
    if not isinstance(config.markup_formatter, bool):
        raise ConfigError("`markup_formatter` must be a boolean")
    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: FormatConfig, **overrides: object) -> FormatConfig:
    """Apply override values to a `FormatConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FormatConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FormatConfig`.

    Examples:
        updated = apply_overrides(config, tabs_per_indent=1)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    # Explicit tabs on the command line win over spaces from a config file
    if "tabs_per_indent" in changes and "indent_spaces" not in changes:
        changes["indent_spaces"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatConfig:
    """Load, override, and validate configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), indent_spaces=4)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def get_indent_unit(config: FormatConfig | None = None) -> str:
    """Return the string emitted for one indent level.

    Examples:
        get_indent_unit(FormatConfig())  # "\\t\\t"
        get_indent_unit(FormatConfig(indent_spaces=2))  # "  "
    """
    config = config or FormatConfig()
    if config.indent_spaces is not None:
        return " " * config.indent_spaces
    return "\t" * max(1, config.tabs_per_indent)


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
