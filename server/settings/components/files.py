"""File browser storage settings.

Uploaded files live on the local filesystem, one directory per hub:
``{FILES_UPLOAD_ROOT}/{hub_id}/...``.
"""

from typing import Final

from server.settings.components import BASE_DIR, config

_MEGABYTE: Final = 1024 * 1024

# Directory holding one subdirectory per hub
FILES_UPLOAD_ROOT = config(
    'FILES_UPLOAD_ROOT',
    default=str(BASE_DIR.joinpath('upload')),
)

# Per-file ceiling, enforced while streaming regardless of transport limits
FILES_MAX_UPLOAD_SIZE = config(
    'FILES_MAX_UPLOAD_SIZE',
    cast=int,
    default=10 * _MEGABYTE,
)

# Django group a user needs to use the file browser
FILES_ACCESS_ROLE = config('FILES_ACCESS_ROLE', default='files')

# Age after which cleanup_uploads removes leftover temporaries
FILES_UPLOAD_TEMP_MAX_AGE_HOURS = config(
    'FILES_UPLOAD_TEMP_MAX_AGE_HOURS',
    cast=int,
    default=24,
)

# Cut oversized multipart bodies short before the default handlers spool them
FILE_UPLOAD_HANDLERS = [
    'server.apps.files.uploadhandlers.MaxSizeUploadHandler',
    'django.core.files.uploadhandler.MemoryFileUploadHandler',
    'django.core.files.uploadhandler.TemporaryFileUploadHandler',
]
