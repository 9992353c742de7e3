"""Confinement of user-supplied paths and names to a tenant root.

Every path coming from a request goes through ``confine`` before it is
used on disk. Confinement is checked twice on purpose: once lexically on
the joined path string and once on the canonical (symlink-resolved)
path, so a symlink planted inside a tenant root cannot lead outside it.
"""

import os
import re
from pathlib import Path
from typing import Final
from urllib.parse import unquote

from server.apps.files.exceptions import (
    InvalidPathError,
    PathTooLongError,
    PathTraversalError,
)

MAX_PATH_LENGTH: Final = 4096
MAX_NAME_BYTES: Final = 255

_SEPARATORS: Final = re.compile(r'[\\/]')
_CONTROL_CHARACTERS: Final = re.compile(r'[\x00-\x1f\x7f]')
_RESERVED_CHARACTERS: Final = frozenset('<>:"|?*')
_LEADING_DOTS_AND_SPACES: Final = re.compile(r'^[\s.]+')
_CURRENT_DIR: Final = '.'
_PARENT_DIR: Final = '..'


def split_segments(user_path: str) -> list[str]:
    """Validate a relative path and split it into segments.

    Both ``/`` and ``\\`` separate segments. Empty and ``.`` segments are
    dropped, so a leading slash simply means "from the root".

    Args:
        user_path: Untrusted path from the request.

    Returns:
        Remaining segments, possibly empty (the root itself).

    Raises:
        InvalidPathError: On NUL bytes, control or reserved characters.
        PathTooLongError: If the path or one segment is too long.
        PathTraversalError: If any segment refers to the parent directory.
    """
    if '\x00' in user_path:
        raise InvalidPathError('NUL byte in path')
    if len(user_path) > MAX_PATH_LENGTH:
        raise PathTooLongError(len(user_path), MAX_PATH_LENGTH)

    segments = []
    for segment in _SEPARATORS.split(user_path.strip()):
        if not segment or segment == _CURRENT_DIR:
            continue
        if _is_parent_reference(segment):
            raise PathTraversalError(user_path)
        _validate_segment(segment)
        segments.append(segment)
    return segments


def confine(root: Path, user_path: str) -> Path:
    """Resolve a user-supplied relative path inside ``root``.

    The target does not have to exist. When it does not, the deepest
    existing ancestor is canonicalized and checked instead.

    Args:
        root: Absolute tenant root (or any directory inside it).
        user_path: Untrusted relative path.

    Returns:
        ``root`` joined with the validated segments.

    Raises:
        PathTraversalError: If the result escapes ``root``.
        InvalidPathError: For malformed segments.
        PathTooLongError: For length violations.
    """
    segments = split_segments(user_path)
    target = Path(root).joinpath(*segments)

    lexical_root = os.path.normpath(root)
    if not _has_prefix(os.path.normpath(target), lexical_root):
        raise PathTraversalError(user_path)

    canonical_root = _canonical(Path(root))
    canonical_target = _canonical(target)
    if not _has_prefix(canonical_target, canonical_root):
        raise PathTraversalError(user_path)

    return target


def sanitize_filename(raw_name: str | None) -> str:
    """Reduce a claimed filename to a single safe path component.

    Browsers sometimes send full client paths (``C:\\fakepath\\a.png``),
    so only the last non-empty component is kept. Control and reserved
    characters are removed, surrounding whitespace and leading dots are
    stripped and the result is bounded to ``MAX_NAME_BYTES`` UTF-8 bytes.

    Args:
        raw_name: Claimed filename, possibly None.

    Returns:
        Sanitized name, or an empty string if nothing usable remains.
    """
    if not raw_name:
        return ''

    components = [
        part for part in _SEPARATORS.split(raw_name) if part.strip()
    ]
    if not components:
        return ''

    name = _CONTROL_CHARACTERS.sub('', components[-1])
    name = ''.join(char for char in name if char not in _RESERVED_CHARACTERS)
    # Drop lone surrogates left over from undecodable client bytes
    name = name.encode('utf-8', 'ignore').decode('utf-8')
    name = _LEADING_DOTS_AND_SPACES.sub('', name).rstrip()
    if _is_parent_reference(name):
        return ''

    stem, suffix = split_name(name)
    return fit_name(stem, suffix)


def sanitize_segments(raw_path: str) -> list[str]:
    """Sanitize every segment of a user-typed nested name.

    Each segment is first checked for parent references, then cleaned
    with ``sanitize_filename``. Segments that clean up to nothing are
    dropped.

    Args:
        raw_path: Nested name such as 'photos/2024'.

    Returns:
        Cleaned segments, possibly empty.

    Raises:
        PathTraversalError: If any segment refers to the parent directory.
    """
    segments = []
    for raw_segment in _SEPARATORS.split(raw_path):
        if _is_parent_reference(raw_segment):
            raise PathTraversalError(raw_path)
        segment = sanitize_filename(raw_segment)
        if segment:
            segments.append(segment)
    return segments


def split_name(name: str) -> tuple[str, str]:
    """Split a filename into stem and suffix (suffix keeps its dot).

    Args:
        name: Sanitized filename.

    Returns:
        Tuple like ('report', '.pdf'); suffix is '' when there is none.
    """
    stem, dot, extension = name.rpartition('.')
    if not dot or not stem or not extension:
        return name, ''
    return stem, dot + extension


def fit_name(stem: str, suffix: str, marker: str = '') -> str:
    """Join name parts, truncating the stem to respect ``MAX_NAME_BYTES``.

    Args:
        stem: Filename without suffix.
        suffix: Extension with its dot, kept intact when possible.
        marker: Text placed between stem and suffix (e.g. ' (1)').

    Returns:
        Joined name no longer than ``MAX_NAME_BYTES`` bytes in UTF-8.
    """
    tail = marker + suffix
    budget = MAX_NAME_BYTES - len(tail.encode('utf-8'))
    if budget <= 0:
        tail = marker
        budget = MAX_NAME_BYTES - len(tail.encode('utf-8'))
    encoded = stem.encode('utf-8')[:budget]
    return encoded.decode('utf-8', 'ignore').rstrip() + tail


def _is_parent_reference(segment: str) -> bool:
    # Decode repeatedly so that %252e%252e counts too
    decoded = segment
    while True:
        unquoted = unquote(decoded)
        if unquoted == decoded:
            break
        decoded = unquoted
    return decoded.strip() == _PARENT_DIR


def _validate_segment(segment: str) -> None:
    if not segment.strip():
        raise InvalidPathError('Blank path segment')
    if _CONTROL_CHARACTERS.search(segment):
        raise InvalidPathError('Control character in path')
    if _RESERVED_CHARACTERS.intersection(segment):
        raise InvalidPathError('Reserved character in path')
    try:
        encoded = segment.encode('utf-8')
    except UnicodeEncodeError as error:
        raise InvalidPathError('Path is not valid text') from error
    if len(encoded) > MAX_NAME_BYTES:
        raise PathTooLongError(len(encoded), MAX_NAME_BYTES)


def _has_prefix(path: str, root: str) -> bool:
    if path == root:
        return True
    return path.startswith(root.rstrip(os.sep) + os.sep)


def _canonical(path: Path) -> str:
    # A missing path is its deepest existing ancestor, resolved, plus the
    # lexical remainder
    existing = _deepest_existing(path)
    remainder = os.path.relpath(path, existing)
    return os.path.normpath(
        os.path.join(os.path.realpath(existing), remainder),
    )


def _deepest_existing(path: Path) -> Path:
    # lexists so that a dangling symlink is resolved rather than skipped
    for candidate in (path, *path.parents):
        if os.path.lexists(candidate):
            return candidate
    return path
