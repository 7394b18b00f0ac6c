"""
Formats HTML templates with embedded Scriban tags.
Normalizes tag spacing, lays out markup, and re-indents both nesting structures.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from .config import ConfigError, build_config
from .filesystem import get_max_file_size, read_template, resolve_template_path, write_template
from .formatter import compute_edit

__all__ = ["cli"]

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: str) -> None:
    """Send package log records to stderr at the requested level."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    logging.getLogger("scriban_indent").setLevel(getattr(logging, level))


@click.command()
@click.version_option()
@click.option("--tabs-per-indent", type=int, help="Tabs per indent level")
@click.option("--indent-spaces", type=int, help="Indent with this many spaces instead of tabs")
@click.option(
    "--markup-formatter/--no-markup-formatter",
    default=None,
    help="Lay out markup before indenting",
)
@click.option("--check", is_flag=True, help="Exit with status 1 if the file would change")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the result instead of rewriting")
@click.option(
    "--log-level", type=click.Choice(LOG_LEVELS), default="WARNING", help="Logging level"
)
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    tabs_per_indent: int | None = None,
    indent_spaces: int | None = None,
    markup_formatter: bool | None = None,
    check: bool = False,
    to_stdout: bool = False,
    log_level: str = "WARNING",
):
    """
    Entry point for formatting a Scriban HTML template.

    Args:
        filepath: Path to the template file to process.
        tabs_per_indent: Override for the number of tabs per indent level.
        indent_spaces: Indent with spaces instead of tabs.
        markup_formatter: Enable or disable the markup layout step.
        check: Report whether the file would change without writing it.
        to_stdout: Print the formatted document instead of rewriting the file.
        log_level: Logging level for diagnostics on stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If CLI parameters reference invalid paths or
            contain invalid configuration values.
        click.ClickException: If the file is too large, cannot be decoded, or
            filesystem safety checks fail.

    Examples:
        scriban-indent templates/page.sbnhtml --indent-spaces 2
    """
    configure_logging(log_level)

    base_dir = Path.cwd().resolve()
    try:
        filepath = resolve_template_path(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            tabs_per_indent=tabs_per_indent,
            indent_spaces=indent_spaces,
            markup_formatter=markup_formatter,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        content, read_stat = read_template(filepath, max_file_size)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    edit = compute_edit(content, config)

    # Already formatted
    if edit is None:
        if to_stdout:
            print(content, end="")
        else:
            click.echo(f"{filepath.name} already formatted", err=True)
        return

    if check:
        click.echo(f"{filepath.name} would be reformatted", err=True)
        sys.exit(1)

    if to_stdout:
        print(edit.new_text, end="")
        return

    try:
        write_template(
            filepath,
            edit.new_text,
            read_stat,
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error
    click.echo(f"reformatted {filepath.name}", err=True)


if __name__ == "__main__":
    cli()
