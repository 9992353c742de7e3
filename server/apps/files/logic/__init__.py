"""Business logic layer for files app.

This package orchestrates the filesystem infrastructure per request:
- Hub root resolution and path confinement
- Directory listing, uploads and folder creation
- Logging of accepted and rejected operations

Views call into this package; they never touch the filesystem directly.
"""
