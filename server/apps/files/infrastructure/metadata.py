"""Metadata helpers for stored files."""

import mimetypes
from pathlib import PurePosixPath
from typing import Final

IMAGE_EXTENSIONS: Final = frozenset((
    'bmp',
    'gif',
    'jpeg',
    'jpg',
    'png',
    'svg',
    'webp',
))


def get_file_extension(filename: str) -> str:
    """Get file extension from filename.

    Args:
        filename: Filename (e.g., 'document.PDF').

    Returns:
        Extension without dot, lowercase (e.g., 'pdf').
        Returns empty string if no extension.
    """
    extension = PurePosixPath(filename).suffix
    return extension.lstrip('.').lower()


def is_image_name(filename: str) -> bool:
    """Check whether a filename carries an image extension.

    Classification is by extension only; contents are never inspected.

    Args:
        filename: Filename to classify.

    Returns:
        True for jpg/jpeg/png/gif/webp/bmp/svg in any letter case.
    """
    return get_file_extension(filename) in IMAGE_EXTENSIONS


def detect_mime_type(filename: str) -> str:
    """Guess MIME type from filename extension.

    Args:
        filename: Filename with extension.

    Returns:
        MIME type string (e.g., 'image/jpeg', 'application/pdf').
        Returns 'application/octet-stream' if type cannot be determined.
    """
    mime_type, _ = mimetypes.guess_type(filename)
    if mime_type is None:
        return 'application/octet-stream'
    return mime_type
