"""Reading and rewriting template files safely."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, TEMPLATE_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "SCRIBAN_INDENT_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit from `SCRIBAN_INDENT_MAX_FILE_SIZE`, or `default`.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.
    """
    raw_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_value is None:
        return default

    try:
        limit = int(raw_value)
    except ValueError:
        limit = 0
    if limit <= 0:
        raise ValueError(
            f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer of bytes, got {raw_value!r}"
        )
    return limit


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink."""
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def resolve_template_path(raw_path: str, base_dir: Path) -> Path:
    """Resolve a user-supplied template path and check that it may be formatted.

    The path must name an existing regular file below `base_dir`, reached
    without symlinks, with one of the template extensions.

    Args:
        raw_path: Absolute or relative path as given on the command line.
        base_dir: Resolved working directory.

    Returns:
        Path: The resolved template path.

    Raises:
        ValueError: If any of the checks fail.

    Examples:
        resolve_template_path("templates/page.sbnhtml", Path.cwd().resolve())
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        raise ValueError(f"Refusing to follow symlinks: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in TEMPLATE_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a Scriban HTML template "
            f"(expected one of: {', '.join(TEMPLATE_EXTENSIONS)})"
        )

    return resolved


def snapshot(filepath: Path) -> os.stat_result:
    """Stat a template without following symlinks.

    Raises:
        IOError: If the path cannot be stat'ed or is not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if stat.S_ISLNK(stat_result.st_mode):
        raise IOError(f"Refusing to follow symlinks: {filepath}")
    if not stat.S_ISREG(stat_result.st_mode):
        raise IOError(f"{filepath} is not a regular file.")

    return stat_result


def _fingerprint(stat_result: os.stat_result) -> tuple:
    return (
        getattr(stat_result, "st_ino", None),
        getattr(stat_result, "st_dev", None),
        stat_result.st_size,
        stat_result.st_mtime_ns,
    )


def ensure_unchanged(before: os.stat_result, after: os.stat_result, filepath: Path):
    """Raise `IOError` when two snapshots of `filepath` differ."""
    if _fingerprint(before) != _fingerprint(after):
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")


def read_template(filepath: Path, max_size: int) -> tuple[str, os.stat_result]:
    """Read a template as UTF-8 and return it with the snapshot taken after reading.

    Raises:
        IOError: If the file is too large, unreadable, not valid UTF-8, or
            changes while it is being read.

    Examples:
        content, read_stat = read_template(Path("page.html"), 10 * 1024 * 1024)
    """
    before = snapshot(filepath)
    if before.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")

    try:
        with open(filepath, encoding="UTF-8") as handle:
            content = handle.read()
    except UnicodeDecodeError as error:
        raise IOError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise IOError(f"Error reading {filepath}: {error}") from error

    after = snapshot(filepath)
    ensure_unchanged(before, after, filepath)
    return content, after


def write_template(
    filepath: Path,
    content: str,
    read_stat: os.stat_result,
    warn: Callable[[str], None] | None = None,
):
    """Replace `filepath` with `content` through a temporary file in the same directory.

    Permission bits and, where allowed, ownership of the original are kept.

    Args:
        filepath: Template to rewrite.
        content: Formatted text.
        read_stat: Snapshot returned by `read_template`.
        warn: Called with a message when ownership cannot be preserved.

    Raises:
        IOError: If the file changed since it was read.
    """
    ensure_unchanged(read_stat, snapshot(filepath), filepath)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=filepath.parent
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())

        os.chmod(temp_path, stat.S_IMODE(read_stat.st_mode))
        if hasattr(os, "chown"):
            try:
                os.chown(temp_path, read_stat.st_uid, read_stat.st_gid)
            except PermissionError:
                if warn is not None:
                    warn(f"Could not preserve ownership of {filepath.name}")

        os.replace(temp_path, filepath)
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
