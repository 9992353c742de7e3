"""Folder creation inside a tenant root."""

from pathlib import Path
from typing import Final

from server.apps.files.exceptions import (
    FolderConflictError,
    FolderIOError,
    InvalidFolderNameError,
    IOErrorKind,
    PathError,
)
from server.apps.files.infrastructure.paths import confine, sanitize_segments

_SEPARATOR: Final = '/'


def create_folder(directory: Path, name: str) -> Path:
    """Create a (possibly nested) folder under ``directory``.

    Every segment of ``name`` is checked for parent references, then
    sanitized like an uploaded filename. Unlike uploads, a name that
    sanitizes to nothing is an error, not replaced by a generated one.
    Creating a folder that already exists succeeds and leaves its
    contents alone.

    Args:
        directory: Confined parent directory.
        name: Folder name from the user, e.g. 'photos' or 'a/b/c'.

    Returns:
        Path of the (existing or created) folder.

    Raises:
        InvalidFolderNameError: If the name is unsafe or empty.
        FolderConflictError: If a file occupies any level of the path.
        FolderIOError: If the filesystem fails.
    """
    try:
        segments = sanitize_segments(name)
    except PathError as error:
        raise InvalidFolderNameError(
            f'Invalid folder name: {name!r}',
        ) from error
    if not segments:
        raise InvalidFolderNameError('Folder name is empty')

    relative = _SEPARATOR.join(segments)
    try:
        target = confine(directory, relative)
    except PathError as error:
        raise InvalidFolderNameError(
            f'Invalid folder name: {name!r}',
        ) from error

    _ensure_no_file_in_the_way(directory, segments)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except (FileExistsError, NotADirectoryError) as error:
        # A file appeared under one of the names after the check above
        raise FolderConflictError(relative) from error
    except OSError as error:
        raise FolderIOError(IOErrorKind.from_os_error(error)) from error
    return target


def _ensure_no_file_in_the_way(directory: Path, segments: list[str]) -> None:
    current = directory
    for depth, segment in enumerate(segments, start=1):
        current = current / segment
        if not current.exists():
            return
        if not current.is_dir():
            raise FolderConflictError(_SEPARATOR.join(segments[:depth]))
