"""Infrastructure layer for files app.

This package contains everything that touches the local filesystem:
- Path confinement and filename sanitization
- Tenant root resolution
- Directory listing, upload placement, folder creation
- Metadata helpers (extension, image classification, MIME type)

Nothing here logs or formats user-facing messages: failures are
raised as typed exceptions from ``server.apps.files.exceptions``.
"""
