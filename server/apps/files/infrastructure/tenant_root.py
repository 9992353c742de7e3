"""Mapping of tenants (hubs) to their storage roots."""

import re
from pathlib import Path
from typing import Final, final

from server.apps.files.exceptions import (
    InvalidPathError,
    IOErrorKind,
    StorageIOError,
)

_TENANT_ID_PATTERN: Final = re.compile(r'[A-Za-z0-9_-]+')


@final
class TenantRootResolver:
    """Resolves a tenant identifier to ``<upload_base>/<tenant_id>``.

    The upload base is passed in explicitly (normally from the
    ``FILES_UPLOAD_ROOT`` setting) so that tests and callers can point
    different resolvers at different trees.
    """

    def __init__(self, upload_base: Path | str) -> None:
        """Initialize resolver.

        Args:
            upload_base: Directory holding one subdirectory per tenant.
        """
        self._upload_base = Path(upload_base)

    @property
    def upload_base(self) -> Path:
        """Get the directory holding all tenant roots."""
        return self._upload_base

    def root_path(self, tenant_id: int | str) -> Path:
        """Compute a tenant root without touching the filesystem.

        Args:
            tenant_id: Hub identifier.

        Returns:
            Absolute path of the tenant root.

        Raises:
            InvalidPathError: If the identifier is not a single safe segment.
        """
        segment = str(tenant_id)
        if isinstance(tenant_id, bool) or not _TENANT_ID_PATTERN.fullmatch(
            segment,
        ):
            raise InvalidPathError(f'Invalid tenant id: {tenant_id!r}')
        return self._upload_base.absolute() / segment

    def resolve(self, tenant_id: int | str) -> Path:
        """Get the tenant root, creating it on first use.

        Creation is idempotent: a root created concurrently by another
        request is not an error.

        Args:
            tenant_id: Hub identifier.

        Returns:
            Absolute path of an existing tenant root directory.

        Raises:
            InvalidPathError: If the identifier is not a single safe segment.
            StorageIOError: If the directory cannot be created.
        """
        root = self.root_path(tenant_id)
        try:
            root.mkdir(parents=True, exist_ok=True)
        except FileExistsError as error:
            # exist_ok only covers directories
            raise StorageIOError(
                IOErrorKind.OTHER,
                f'Tenant root is not a directory: {root}',
            ) from error
        except OSError as error:
            raise StorageIOError.from_os_error(
                error,
                f'Failed to create tenant root: {root}',
            ) from error
        return root
