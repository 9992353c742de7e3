"""Tests for the multipart size limit handler."""

import pytest
from django.core.files.uploadhandler import StopUpload
from django.test import RequestFactory

from server.apps.files.uploadhandlers import (
    MaxSizeUploadHandler,
    upload_limit_exceeded,
)


@pytest.fixture
def handler(settings):
    """Create handler limited to 4 bytes.

    Returns:
        MaxSizeUploadHandler instance with a file started.
    """
    settings.FILES_MAX_UPLOAD_SIZE = 4
    limited = MaxSizeUploadHandler()
    limited.new_file('image', 'a.bin', 'application/octet-stream', None)
    return limited


def test_passes_chunks_within_limit(handler):
    """Test that data within the limit reaches the next handler."""
    assert handler.receive_data_chunk(b'12', 0) == b'12'
    assert handler.receive_data_chunk(b'34', 2) == b'34'
    assert handler.limit_exceeded is False


def test_stops_past_limit(handler):
    """Test that the first byte over the limit stops parsing."""
    handler.receive_data_chunk(b'1234', 0)

    with pytest.raises(StopUpload):
        handler.receive_data_chunk(b'5', 4)

    assert handler.limit_exceeded is True


def test_limit_is_per_file(handler):
    """Test that every file gets the full limit."""
    handler.receive_data_chunk(b'1234', 0)
    handler.new_file('image', 'b.bin', 'application/octet-stream', None)

    assert handler.receive_data_chunk(b'1234', 0) == b'1234'


def test_file_complete_defers(handler):
    """Test that building the file is left to the next handler."""
    assert handler.file_complete(4) is None


def test_upload_limit_exceeded(handler):
    """Test detection of a cut-short upload on the request."""
    request = RequestFactory().post('/files/upload')
    request.upload_handlers = [handler]

    assert upload_limit_exceeded(request) is False

    handler.limit_exceeded = True

    assert upload_limit_exceeded(request) is True
