"""Tests for metadata utilities."""

import pytest

from server.apps.files.infrastructure.metadata import (
    detect_mime_type,
    get_file_extension,
    is_image_name,
)


def test_detect_mime_type():
    """Test MIME type detection from filename."""
    assert detect_mime_type('test.pdf') == 'application/pdf'
    assert detect_mime_type('test.txt') == 'text/plain'
    assert detect_mime_type('test.jpg') == 'image/jpeg'
    assert detect_mime_type('test.png') == 'image/png'


def test_detect_mime_type_unknown():
    """Test MIME type detection for unknown extension."""
    assert detect_mime_type('test.unknown') == 'application/octet-stream'
    assert detect_mime_type('README') == 'application/octet-stream'


def test_get_file_extension():
    """Test file extension extraction."""
    assert get_file_extension('document.pdf') == 'pdf'
    assert get_file_extension('image.JPG') == 'jpg'
    assert get_file_extension('archive.tar.gz') == 'gz'
    assert get_file_extension('no_extension') == ''


@pytest.mark.parametrize('filename', [
    'photo.png',
    'photo.PNG',
    'scan.jpeg',
    'scan.Jpg',
    'anim.gif',
    'modern.webp',
    'old.bmp',
    'logo.svg',
])
def test_is_image_name_accepts_image_extensions(filename):
    """Test that known image extensions are classified as images."""
    assert is_image_name(filename) is True


@pytest.mark.parametrize('filename', [
    'notes.txt',
    'report.pdf',
    'png',
    'photo.png.exe',
    'archive',
])
def test_is_image_name_rejects_other_files(filename):
    """Test that other files are not classified as images."""
    assert is_image_name(filename) is False
