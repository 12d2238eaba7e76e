"""Applying ACLs to a whole directory tree."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator

from .manager import ACLManager, ACLManagerError

logger = logging.getLogger(__name__)


def walk_tree(directory) -> Iterator[tuple[str, bool]]:
    """Yield ``(path, is_directory)`` for a directory and everything below it.

    The directory itself comes first; symbolic links are not followed.
    """
    directory = os.fspath(directory)
    yield directory, True
    with os.scandir(directory) as entries:
        children = sorted(entries, key=lambda entry: entry.name)
    for child in children:
        if child.is_dir(follow_symlinks=False):
            yield from walk_tree(child.path)
        else:
            yield child.path, False


def apply_recursively(
    root,
    directory_access_text: str,
    directory_default_text: str,
    file_access_text: str,
    progress: Callable[[float], None] | None = None,
) -> list[tuple[str, str]]:
    """Set the given ACLs on every directory and file under ``root``.

    Failures on single files are logged and collected, never raised; the
    returned list holds ``(path, message)`` for each of them. ``progress``
    receives the fraction of files handled after each one.
    """
    paths = list(walk_tree(root))
    total = len(paths)
    failures: list[tuple[str, str]] = []
    for number, (path, is_directory) in enumerate(paths, start=1):
        try:
            if is_directory:
                ACLManager.set_file_acl(path, directory_access_text, directory_default_text)
            else:
                ACLManager.set_file_acl(path, file_access_text, "")
        except ACLManagerError as error:
            logger.warning("Exception when setting ACL of file '%s': '%s'", path, error)
            failures.append((path, str(error)))
        except Exception as error:  # keep going whatever a single file does
            logger.warning("Unknown exception when setting ACL of file '%s'", path)
            failures.append((path, str(error)))
        if progress is not None:
            progress(number / total)
    return failures