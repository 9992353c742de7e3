"""Exceptions for files app."""

import enum
from typing import final


class FilesError(Exception):
    """Base class for all file browser errors."""


class PathError(FilesError):
    """Raised when a user-supplied path cannot be confined to a root."""


@final
class PathTraversalError(PathError):
    """Raised when a path tries to escape its root directory."""

    def __init__(self, user_path: str) -> None:
        """Initialize PathTraversalError.

        Args:
            user_path: The offending path as supplied by the caller.
        """
        self.user_path = user_path
        super().__init__(f'Path escapes its root: {user_path!r}')


@final
class InvalidPathError(PathError):
    """Raised for malformed paths (NUL bytes, reserved characters)."""


@final
class PathTooLongError(PathError):
    """Raised when a path or one of its segments exceeds the length limit."""

    def __init__(self, length: int, limit: int) -> None:
        """Initialize PathTooLongError.

        Args:
            length: Observed length.
            limit: Maximum allowed length.
        """
        self.length = length
        self.limit = limit
        super().__init__(f'Path too long: {length} > {limit}')


@final
class IOErrorKind(enum.Enum):
    """Coarse classification of filesystem failures."""

    PERMISSION = 'permission'
    NOT_FOUND = 'not_found'
    OTHER = 'other'

    @classmethod
    def from_os_error(cls, error: OSError) -> 'IOErrorKind':
        """Classify an OSError.

        Args:
            error: Error raised by the operating system.

        Returns:
            Matching kind, OTHER for anything unrecognised.
        """
        if isinstance(error, PermissionError):
            return cls.PERMISSION
        if isinstance(error, FileNotFoundError):
            return cls.NOT_FOUND
        return cls.OTHER


@final
class StorageIOError(FilesError):
    """Raised when the filesystem itself fails."""

    def __init__(self, kind: IOErrorKind, message: str) -> None:
        """Initialize StorageIOError.

        Args:
            kind: Failure classification.
            message: Short description of the failed operation.
        """
        self.kind = kind
        super().__init__(f'{message} ({kind.value})')

    @classmethod
    def from_os_error(cls, error: OSError, message: str) -> 'StorageIOError':
        """Build from an OSError, keeping its classification.

        Args:
            error: Original OS error.
            message: Short description of the failed operation.

        Returns:
            New StorageIOError. Callers chain it with ``from error``.
        """
        return cls(IOErrorKind.from_os_error(error), message)


class UploadError(FilesError):
    """Raised when an upload cannot be stored."""


@final
class UploadTooLargeError(UploadError):
    """Raised when an upload stream exceeds the size ceiling."""

    def __init__(self, max_size: int) -> None:
        """Initialize UploadTooLargeError.

        Args:
            max_size: Ceiling in bytes that was exceeded.
        """
        self.max_size = max_size
        super().__init__(f'Upload exceeds {max_size} bytes')


@final
class UploadConflictError(UploadError):
    """Raised when no free name is found for an upload."""

    def __init__(self, name: str, attempts: int) -> None:
        """Initialize UploadConflictError.

        Args:
            name: Requested (sanitized) filename.
            attempts: How many candidate names were tried.
        """
        self.name = name
        self.attempts = attempts
        super().__init__(
            f'No free name for {name!r} after {attempts} attempts',
        )


@final
class UploadIOError(UploadError):
    """Raised when the filesystem fails while storing an upload."""

    def __init__(self, kind: IOErrorKind) -> None:
        """Initialize UploadIOError.

        Args:
            kind: Failure classification.
        """
        self.kind = kind
        super().__init__(f'Failed to store upload ({kind.value})')


class FolderError(FilesError):
    """Raised when a folder cannot be created."""


@final
class InvalidFolderNameError(FolderError):
    """Raised when a folder name is empty or unsafe."""


@final
class FolderConflictError(FolderError):
    """Raised when a non-directory already occupies the folder path."""

    def __init__(self, path: str) -> None:
        """Initialize FolderConflictError.

        Args:
            path: Path relative to the requested parent directory.
        """
        self.path = path
        super().__init__(f'Not a directory: {path}')


@final
class FolderIOError(FolderError):
    """Raised when the filesystem fails while creating a folder."""

    def __init__(self, kind: IOErrorKind) -> None:
        """Initialize FolderIOError.

        Args:
            kind: Failure classification.
        """
        self.kind = kind
        super().__init__(f'Failed to create folder ({kind.value})')
