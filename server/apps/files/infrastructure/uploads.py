"""Atomic placement of uploaded files.

An upload is streamed into a hidden temporary file in the target
directory and then hard-linked under its final name. ``os.link`` refuses
to replace an existing entry, so placement is atomic and can never
overwrite a file, even when two uploads race for the same name.
"""

import contextlib
import dataclasses
import os
import secrets
import uuid
from pathlib import Path
from typing import BinaryIO, Final, final

from server.apps.files.entries import DirectoryEntry
from server.apps.files.exceptions import (
    IOErrorKind,
    UploadConflictError,
    UploadIOError,
    UploadTooLargeError,
)
from server.apps.files.infrastructure.listing import (
    TEMP_UPLOAD_PREFIX,
    TEMP_UPLOAD_SUFFIX,
    build_file_entry,
)
from server.apps.files.infrastructure.paths import (
    fit_name,
    sanitize_filename,
    split_name,
)

MAX_UPLOAD_SIZE: Final = 10 * 1024 * 1024  # 10 MB
MAX_NAME_ATTEMPTS: Final = 100

_CHUNK_SIZE: Final = 64 * 1024
_FILE_MODE: Final = 0o644
_GENERATED_NAME_PREFIX: Final = 'upload-'


@final
@dataclasses.dataclass(frozen=True, slots=True)
class UploadTarget:
    """Where and under which name a single upload should land."""

    directory: Path
    desired_name: str
    max_size: int = MAX_UPLOAD_SIZE

    @classmethod
    def build(
        cls,
        directory: Path,
        claimed_name: str | None,
        max_size: int = MAX_UPLOAD_SIZE,
    ) -> 'UploadTarget':
        """Create a target from an untrusted claimed filename.

        Browsers sometimes send empty names or names made only of
        forbidden characters; those get a generated name instead.

        Args:
            directory: Confined directory receiving the file.
            claimed_name: Filename supplied by the client.
            max_size: Size ceiling in bytes.

        Returns:
            UploadTarget with a non-empty sanitized name.
        """
        name = sanitize_filename(claimed_name)
        if not name:
            name = f'{_GENERATED_NAME_PREFIX}{uuid.uuid4().hex}'
        return cls(directory=directory, desired_name=name, max_size=max_size)


def store_upload(  # noqa: WPS211
    directory: Path,
    claimed_name: str | None,
    content: BinaryIO,
    max_size: int = MAX_UPLOAD_SIZE,
    root: Path | None = None,
) -> DirectoryEntry:
    """Stream an upload into ``directory`` without overwriting anything.

    If the name is taken, ``name (1).ext``, ``name (2).ext``... are tried
    in turn, up to ``MAX_NAME_ATTEMPTS`` names in total.

    Args:
        directory: Existing, already confined directory.
        claimed_name: Filename supplied by the client.
        content: Readable binary stream.
        max_size: Size ceiling in bytes, checked while streaming.
        root: Tenant root used for the entry's relative URL.

    Returns:
        Entry describing the stored file.

    Raises:
        UploadTooLargeError: If the stream is longer than ``max_size``.
        UploadConflictError: If no free name was found.
        UploadIOError: If the filesystem fails.
    """
    target = UploadTarget.build(directory, claimed_name, max_size)
    temp_path = _write_temporary(target, content)
    try:
        final_path = _place(temp_path, target)
    finally:
        _discard(temp_path)
    return build_file_entry(final_path, root or directory)


def candidate_name(desired_name: str, attempt: int) -> str:
    """Get the name tried on a given attempt.

    Args:
        desired_name: Sanitized requested name.
        attempt: Zero for the requested name, then 1, 2, ...

    Returns:
        'report.pdf', then 'report (1).pdf', 'report (2).pdf', ...
    """
    if not attempt:
        return desired_name
    stem, suffix = split_name(desired_name)
    return fit_name(stem, suffix, f' ({attempt})')


def _write_temporary(target: UploadTarget, content: BinaryIO) -> Path:
    token = secrets.token_hex(8)
    temp_path = target.directory / (
        f'{TEMP_UPLOAD_PREFIX}{token}{TEMP_UPLOAD_SUFFIX}'
    )
    try:
        fd = os.open(
            temp_path,
            os.O_WRONLY | os.O_CREAT | os.O_EXCL,
            _FILE_MODE,
        )
    except OSError as error:
        raise UploadIOError(IOErrorKind.from_os_error(error)) from error

    try:
        with os.fdopen(fd, 'wb') as temp_file:
            _copy_bounded(content, temp_file, target.max_size)
            temp_file.flush()
            os.fsync(temp_file.fileno())
    except OSError as error:
        _discard(temp_path)
        raise UploadIOError(IOErrorKind.from_os_error(error)) from error
    except BaseException:
        # Includes client disconnects and task cancellation
        _discard(temp_path)
        raise
    return temp_path


def _copy_bounded(source: BinaryIO, sink: BinaryIO, max_size: int) -> None:
    written = 0
    while True:
        chunk = source.read(_CHUNK_SIZE)
        if not chunk:
            return
        written += len(chunk)
        if written > max_size:
            raise UploadTooLargeError(max_size)
        sink.write(chunk)


def _place(temp_path: Path, target: UploadTarget) -> Path:
    for attempt in range(MAX_NAME_ATTEMPTS):
        candidate = target.directory / candidate_name(
            target.desired_name,
            attempt,
        )
        try:
            os.link(temp_path, candidate)
        except FileExistsError:
            continue
        except OSError as error:
            raise UploadIOError(IOErrorKind.from_os_error(error)) from error
        return candidate
    raise UploadConflictError(target.desired_name, MAX_NAME_ATTEMPTS)


def _discard(temp_path: Path) -> None:
    # Best effort: cleanup_uploads purges anything left behind
    with contextlib.suppress(OSError):
        temp_path.unlink()
