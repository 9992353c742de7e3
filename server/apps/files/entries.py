"""Transient listing records produced by the storage layer.

Entries are built fresh for every request and never persisted:
the filesystem tree is the only source of truth.
"""

import dataclasses
from typing import final


@final
@dataclasses.dataclass(frozen=True, slots=True)
class FolderKind:
    """Entry kind for folders."""


@final
@dataclasses.dataclass(frozen=True, slots=True)
class FileKind:
    """Entry kind for regular files."""

    is_image: bool = False


EntryKind = FolderKind | FileKind


@final
@dataclasses.dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """One immediate child of a listed directory.

    Attributes:
        name: Display name (single path component).
        kind: FolderKind or FileKind, classified once by the lister.
        size: Size in bytes for files, None for folders or unknown.
        relative_url: Percent-encoded POSIX path relative to the tenant
            root, suitable for ``?path=`` deep links.
    """

    name: str
    kind: EntryKind
    size: int | None = None
    relative_url: str = ''

    @property
    def is_directory(self) -> bool:
        """Whether the entry is a folder."""
        return isinstance(self.kind, FolderKind)

    @property
    def is_image(self) -> bool:
        """Whether the entry is a file with an image extension."""
        return isinstance(self.kind, FileKind) and self.kind.is_image

    def sort_key(self) -> tuple[bool, str, str]:
        """Folders first, then case-insensitive name, then exact name."""
        return (not self.is_directory, self.name.casefold(), self.name)
