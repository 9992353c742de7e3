"""Upload handlers bounding multipart bodies before they hit the disk."""

from typing import Any, final

from django.conf import settings
from django.core.files.uploadhandler import FileUploadHandler, StopUpload


@final
class MaxSizeUploadHandler(FileUploadHandler):
    """Stop parsing as soon as one file exceeds ``FILES_MAX_UPLOAD_SIZE``.

    Must come first in ``FILE_UPLOAD_HANDLERS``: chunks are passed on to
    the following handlers only while the file is within the limit, so
    an oversized file is never spooled completely. The view checks
    ``limit_exceeded`` after parsing and answers 413.
    """

    def __init__(self, request: Any = None) -> None:
        """Initialize handler with the configured limit."""
        super().__init__(request)
        self.max_size: int = settings.FILES_MAX_UPLOAD_SIZE
        self.limit_exceeded = False
        self._received = 0

    def new_file(self, *args: Any, **kwargs: Any) -> None:
        """Reset the byte count for the next file."""
        super().new_file(*args, **kwargs)
        self._received = 0

    def receive_data_chunk(self, raw_data: bytes, start: int) -> bytes:
        """Count bytes and pass the chunk on while within the limit.

        Raises:
            StopUpload: If the current file grew past the limit.
        """
        self._received += len(raw_data)
        if self._received > self.max_size:
            self.limit_exceeded = True
            raise StopUpload(connection_reset=False)
        return raw_data

    def file_complete(self, file_size: int) -> None:
        """Let the next handler build the uploaded file."""
        return None


def upload_limit_exceeded(request: Any) -> bool:
    """Check whether parsing ``request`` stopped at the size limit.

    Args:
        request: Request whose body has already been parsed.

    Returns:
        True if a ``MaxSizeUploadHandler`` cut the upload short.
    """
    return any(
        isinstance(handler, MaxSizeUploadHandler) and handler.limit_exceeded
        for handler in request.upload_handlers
    )
