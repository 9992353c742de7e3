"""Business logic for the per-hub file browser.

``FileBrowser`` strings the infrastructure pieces together for one
request: resolve the hub root, confine the requested path, then list,
store or create inside it. This is the layer that logs; the
infrastructure below only raises.
"""

import contextlib
import logging
from pathlib import Path
from typing import BinaryIO, final

from django.conf import settings

from server.apps.files.entries import DirectoryEntry
from server.apps.files.exceptions import (
    FolderError,
    InvalidPathError,
    IOErrorKind,
    PathError,
    StorageIOError,
    UploadError,
    UploadIOError,
)
from server.apps.files.infrastructure.folders import create_folder
from server.apps.files.infrastructure.listing import list_directory
from server.apps.files.infrastructure.paths import confine
from server.apps.files.infrastructure.tenant_root import TenantRootResolver
from server.apps.files.infrastructure.uploads import (
    MAX_UPLOAD_SIZE,
    store_upload,
)

logger = logging.getLogger(__name__)

TenantId = int | str


@final
class FileBrowser:
    """File operations scoped to a single hub per call."""

    def __init__(
        self,
        resolver: TenantRootResolver,
        max_upload_size: int = MAX_UPLOAD_SIZE,
    ) -> None:
        """Initialize file browser.

        Args:
            resolver: Maps hub ids to storage roots.
            max_upload_size: Per-file ceiling in bytes.
        """
        self._resolver = resolver
        self._max_upload_size = max_upload_size

    @property
    def max_upload_size(self) -> int:
        """Get the per-file upload ceiling in bytes."""
        return self._max_upload_size

    def list_entries(
        self,
        tenant_id: TenantId,
        path: str = '',
    ) -> list[DirectoryEntry]:
        """List a folder of the hub.

        A folder that does not exist (yet) lists as empty.

        Args:
            tenant_id: Hub identifier.
            path: Folder path relative to the hub root ('' for root).

        Returns:
            Entries ordered folders first, then files.

        Raises:
            PathError: If the path is rejected or points at a file.
            StorageIOError: If the folder cannot be read.
        """
        root, target = self._confine(tenant_id, path)
        logger.debug('Listing directory: hub=%s path=%s', tenant_id, path)

        try:
            return list_directory(target, root)
        except StorageIOError as error:
            if error.kind is IOErrorKind.NOT_FOUND:
                return []
            if target.exists() and not target.is_dir():
                raise InvalidPathError(f'Not a folder: {path}') from error
            logger.exception('Failed to list directory: %s', target)
            raise

    def upload(
        self,
        tenant_id: TenantId,
        path: str,
        claimed_name: str | None,
        content: BinaryIO,
    ) -> DirectoryEntry:
        """Store an uploaded file in a folder of the hub.

        The folder is created if it does not exist yet.

        Args:
            tenant_id: Hub identifier.
            path: Target folder relative to the hub root.
            claimed_name: Filename sent by the client.
            content: Readable binary stream.

        Returns:
            Entry of the stored file (its name may be disambiguated).

        Raises:
            PathError: If the folder path is rejected.
            UploadError: If the file cannot be stored.
        """
        root, target = self._confine(tenant_id, path)
        created = self._ensure_upload_directory(target, root, path)

        logger.info(
            'Uploading file: hub=%s path=%s name=%r',
            tenant_id,
            path,
            claimed_name,
        )
        try:
            entry = store_upload(
                target,
                claimed_name,
                content,
                max_size=self._max_upload_size,
                root=root,
            )
        except UploadError as error:
            _remove_created(created)
            logger.warning(
                'Upload rejected: hub=%s path=%s error=%s',
                tenant_id,
                path,
                error,
            )
            raise
        except BaseException:
            _remove_created(created)
            raise

        logger.info(
            'File uploaded: hub=%s url=%s',
            tenant_id,
            entry.relative_url,
        )
        return entry

    def create_folder(
        self,
        tenant_id: TenantId,
        current_path: str,
        name: str,
    ) -> Path:
        """Create a (possibly nested) folder inside ``current_path``.

        Args:
            tenant_id: Hub identifier.
            current_path: Folder the user is looking at.
            name: New folder name, may contain '/'.

        Returns:
            Absolute path of the folder.

        Raises:
            PathError: If ``current_path`` is rejected.
            FolderError: If the folder cannot be created.
        """
        _, parent = self._confine(tenant_id, current_path)

        logger.info(
            'Creating folder: hub=%s path=%s name=%r',
            tenant_id,
            current_path,
            name,
        )
        try:
            return create_folder(parent, name)
        except FolderError as error:
            logger.warning(
                'Folder rejected: hub=%s path=%s error=%s',
                tenant_id,
                current_path,
                error,
            )
            raise

    def open_file(self, tenant_id: TenantId, path: str) -> Path:
        """Locate a stored file for download.

        Args:
            tenant_id: Hub identifier.
            path: File path relative to the hub root.

        Returns:
            Absolute, confined path of an existing regular file.

        Raises:
            PathError: If the path is rejected.
            StorageIOError: If there is no regular file at the path.
        """
        _, target = self._confine(tenant_id, path)
        if not target.is_file():
            raise StorageIOError(
                IOErrorKind.NOT_FOUND,
                f'No such file: {path}',
            )
        return target

    def _confine(self, tenant_id: TenantId, path: str) -> tuple[Path, Path]:
        root = self._resolver.resolve(tenant_id)
        try:
            return root, confine(root, path or '')
        except PathError:
            logger.warning('Rejected path: hub=%s path=%r', tenant_id, path)
            raise

    def _ensure_upload_directory(
        self,
        target: Path,
        root: Path,
        path: str,
    ) -> list[Path]:
        if target.exists() and not target.is_dir():
            raise InvalidPathError(f'Not a folder: {path}')
        missing = _missing_levels(target, root)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            _remove_created(missing)
            logger.exception('Failed to prepare upload folder: %s', target)
            raise UploadIOError(IOErrorKind.from_os_error(error)) from error
        return missing


def _missing_levels(target: Path, root: Path) -> list[Path]:
    # Shallowest first, never including the root itself
    missing = []
    current = target
    while current != root and not current.exists():
        missing.append(current)
        current = current.parent
    missing.reverse()
    return missing


def _remove_created(levels: list[Path]) -> None:
    # Deepest first; a level filled by a concurrent request stays
    for level in reversed(levels):
        with contextlib.suppress(OSError):
            level.rmdir()


def get_file_browser() -> FileBrowser:
    """Build a file browser from Django settings.

    Returns:
        FileBrowser rooted at ``settings.FILES_UPLOAD_ROOT``.
    """
    return FileBrowser(
        TenantRootResolver(settings.FILES_UPLOAD_ROOT),
        max_upload_size=settings.FILES_MAX_UPLOAD_SIZE,
    )
