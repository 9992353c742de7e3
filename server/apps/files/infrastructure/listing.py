"""Directory listing for the file browser."""

import os
from pathlib import Path
from typing import Final
from urllib.parse import quote

from server.apps.files.entries import (
    DirectoryEntry,
    EntryKind,
    FileKind,
    FolderKind,
)
from server.apps.files.exceptions import IOErrorKind, StorageIOError
from server.apps.files.infrastructure.metadata import is_image_name

# Prefix and suffix of in-flight upload temporaries (see uploads.py)
TEMP_UPLOAD_PREFIX: Final = '.upload-'
TEMP_UPLOAD_SUFFIX: Final = '.part'


def is_temp_upload(name: str) -> bool:
    """Check whether a name belongs to an unfinished upload."""
    return name.startswith(TEMP_UPLOAD_PREFIX) and name.endswith(
        TEMP_UPLOAD_SUFFIX,
    )


def list_directory(
    directory: Path,
    root: Path | None = None,
) -> list[DirectoryEntry]:
    """List immediate children of a directory.

    Folders come first, then files; each group is ordered by
    case-insensitive name. Entries with undecodable names, unfinished
    uploads and entries whose type cannot be read are skipped instead of
    failing the whole listing.

    Args:
        directory: Confined absolute directory to read.
        root: Tenant root used to build relative URLs. Defaults to
            ``directory`` itself.

    Returns:
        Freshly read, ordered entries.

    Raises:
        StorageIOError: If the directory is missing, is not a directory,
            or cannot be read.
    """
    base_url = _relative_url(directory, root or directory)
    entries: list[DirectoryEntry] = []

    try:
        with os.scandir(directory) as scanner:
            for dir_entry in scanner:
                entry = _build_entry(dir_entry, base_url)
                if entry is not None:
                    entries.append(entry)
    except NotADirectoryError as error:
        raise StorageIOError(
            IOErrorKind.OTHER,
            f'Not a directory: {directory}',
        ) from error
    except OSError as error:
        raise StorageIOError.from_os_error(
            error,
            f'Failed to list directory: {directory}',
        ) from error

    entries.sort(key=DirectoryEntry.sort_key)
    return entries


def build_file_entry(path: Path, root: Path) -> DirectoryEntry:
    """Describe a single stored file.

    Args:
        path: Absolute path of the file.
        root: Tenant root used to build the relative URL.

    Returns:
        File entry with its current size.
    """
    try:
        size: int | None = path.stat().st_size
    except OSError:
        size = None
    return DirectoryEntry(
        name=path.name,
        kind=FileKind(is_image=is_image_name(path.name)),
        size=size,
        relative_url=_relative_url(path, root),
    )


def _build_entry(
    dir_entry: os.DirEntry[str],
    base_url: str,
) -> DirectoryEntry | None:
    name = dir_entry.name
    if is_temp_upload(name) or not _is_displayable(name):
        return None

    try:
        is_directory = dir_entry.is_dir()
    except OSError:
        return None

    kind: EntryKind
    size = None
    if is_directory:
        kind = FolderKind()
    else:
        kind = FileKind(is_image=is_image_name(name))
        try:
            size = dir_entry.stat().st_size
        except OSError:
            size = None

    quoted = quote(name)
    return DirectoryEntry(
        name=name,
        kind=kind,
        size=size,
        relative_url=f'{base_url}/{quoted}' if base_url else quoted,
    )


def _is_displayable(name: str) -> bool:
    # os.scandir maps undecodable bytes to lone surrogates
    try:
        name.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


def _relative_url(path: Path, root: Path) -> str:
    relative = Path(path).relative_to(root)
    return '/'.join(quote(part) for part in relative.parts)
