"""Source discovery: find candidate entry scripts under the source directory.

The listing order is whatever the filesystem returns; callers must not rely
on it being sorted.
"""

from __future__ import annotations

import os
from pathlib import Path

from .errors import EmptySourceDirectory, MissingSourceDirectory

DEFAULT_SCRIPT_EXTENSIONS: tuple[str, ...] = (".js",)


def is_script(name: str, extensions: tuple[str, ...] = DEFAULT_SCRIPT_EXTENSIONS) -> bool:
    """Return ``True`` if *name* carries one of the script *extensions*.

    This is a real extension match: ``"abcjs"`` is not a script, and
    ``"c.jsx"`` only matches when ``".jsx"`` is listed.
    """
    return any(name.endswith(ext) and len(name) > len(ext) for ext in extensions)


def discover(
    source_dir: str | Path,
    extensions: tuple[str, ...] = DEFAULT_SCRIPT_EXTENSIONS,
) -> list[str]:
    """List candidate entry files directly under *source_dir*.

    Args:
        source_dir: Directory to scan (not recursive).
        extensions: Filename suffixes that identify script files.

    Returns:
        Matching entry names in directory-listing order.

    Raises:
        MissingSourceDirectory: *source_dir* is absent, not a directory, or
            unreadable.
        EmptySourceDirectory: *source_dir* has no entries, or none of them
            is a script.
    """
    path = Path(source_dir)
    try:
        entries = [entry.name for entry in os.scandir(path)]
    except FileNotFoundError:
        raise MissingSourceDirectory(
            f"Source directory not found: {path}", source_dir=str(path)
        ) from None
    except NotADirectoryError:
        raise MissingSourceDirectory(
            f"Source path is not a directory: {path}", source_dir=str(path)
        ) from None
    except PermissionError:
        raise MissingSourceDirectory(
            f"Source directory is not readable: {path}", source_dir=str(path)
        ) from None

    if not entries:
        raise EmptySourceDirectory(
            f"Source directory is empty: {path}", source_dir=str(path)
        )

    scripts = [name for name in entries if is_script(name, extensions)]
    if not scripts:
        raise EmptySourceDirectory(
            f"No {'/'.join(extensions)} files found in {path}", source_dir=str(path)
        )
    return scripts
