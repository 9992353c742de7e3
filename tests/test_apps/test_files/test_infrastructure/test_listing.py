"""Tests for directory listing."""

import os
import sys

import pytest

from server.apps.files.entries import FileKind, FolderKind
from server.apps.files.exceptions import IOErrorKind, StorageIOError
from server.apps.files.infrastructure.listing import (
    is_temp_upload,
    list_directory,
)


def test_folders_first_then_case_insensitive_names(tmp_path):
    """Test the documented ordering contract."""
    (tmp_path / 'b.txt').write_bytes(b'b')
    (tmp_path / 'A.txt').write_bytes(b'a')
    (tmp_path / 'z').mkdir()

    entries = list_directory(tmp_path)

    assert [entry.name for entry in entries] == ['z', 'A.txt', 'b.txt']
    assert [entry.is_directory for entry in entries] == [True, False, False]


def test_ordering_is_total_for_case_variants(tmp_path):
    """Test that names differing only in case keep a stable order."""
    for name in ('readme', 'README', 'ReadMe'):
        (tmp_path / name).write_bytes(b'')

    first = [entry.name for entry in list_directory(tmp_path)]
    second = [entry.name for entry in list_directory(tmp_path)]

    assert first == second == ['README', 'ReadMe', 'readme']


def test_classifies_entries(tmp_path):
    """Test folder/file/image classification and sizes."""
    (tmp_path / 'b_folder').mkdir()
    (tmp_path / 'a_file.txt').write_bytes(b'hello')
    (tmp_path / 'c_image.PNG').write_bytes(b'fakepng')

    folder, text_file, image = list_directory(tmp_path)

    assert folder.kind == FolderKind()
    assert folder.size is None
    assert text_file.kind == FileKind(is_image=False)
    assert text_file.size == 5
    assert image.is_image is True
    assert image.size == 7


def test_folder_named_like_image_is_not_an_image(tmp_path):
    """Test that image classification applies to files only."""
    (tmp_path / 'album.jpg').mkdir()

    (entry,) = list_directory(tmp_path)

    assert entry.is_directory is True
    assert entry.is_image is False


def test_immediate_children_only(tmp_path):
    """Test that listing is not recursive."""
    nested = tmp_path / 'outer' / 'inner'
    nested.mkdir(parents=True)
    (nested / 'deep.txt').write_bytes(b'')

    assert [entry.name for entry in list_directory(tmp_path)] == ['outer']


def test_relative_urls(tmp_path):
    """Test that URLs are relative to the tenant root and encoded."""
    directory = tmp_path / 'my docs'
    directory.mkdir()
    (directory / 'report #1.pdf').write_bytes(b'')
    (directory / 'sub').mkdir()

    entries = list_directory(directory, root=tmp_path)

    assert [entry.relative_url for entry in entries] == [
        'my%20docs/sub',
        'my%20docs/report%20%231.pdf',
    ]


def test_relative_urls_default_to_listed_directory(tmp_path):
    """Test URLs without an explicit root."""
    (tmp_path / 'file.txt').write_bytes(b'')

    (entry,) = list_directory(tmp_path)

    assert entry.relative_url == 'file.txt'


def test_hides_unfinished_uploads(tmp_path):
    """Test that upload temporaries are never listed."""
    (tmp_path / '.upload-0123abcd.part').write_bytes(b'partial')
    (tmp_path / 'done.txt').write_bytes(b'')

    assert [entry.name for entry in list_directory(tmp_path)] == ['done.txt']


def test_is_temp_upload():
    """Test temporary name detection."""
    assert is_temp_upload('.upload-0123abcd.part') is True
    assert is_temp_upload('upload-0123abcd.part') is False
    assert is_temp_upload('.upload-0123abcd.txt') is False


@pytest.mark.skipif(
    sys.platform != 'linux',
    reason='Needs a filesystem accepting arbitrary bytes in names',
)
def test_skips_undecodable_names(tmp_path):
    """Test that one bad name does not abort the listing."""
    (tmp_path / 'good.txt').write_bytes(b'')
    bad_name = os.path.join(os.fsencode(tmp_path), b'bad\xff.txt')
    with open(bad_name, 'wb'):
        pass

    assert [entry.name for entry in list_directory(tmp_path)] == ['good.txt']


def test_empty_directory(tmp_path):
    """Test listing an empty directory."""
    assert list_directory(tmp_path) == []


def test_listing_is_fresh(tmp_path):
    """Test that each call re-reads the directory."""
    assert list_directory(tmp_path) == []

    (tmp_path / 'new.txt').write_bytes(b'')

    assert [entry.name for entry in list_directory(tmp_path)] == ['new.txt']


def test_missing_directory(tmp_path):
    """Test that a missing directory is NOT_FOUND."""
    with pytest.raises(StorageIOError) as exc_info:
        list_directory(tmp_path / 'missing')

    assert exc_info.value.kind is IOErrorKind.NOT_FOUND


def test_file_instead_of_directory(tmp_path):
    """Test that listing a file is an error."""
    file_path = tmp_path / 'file.txt'
    file_path.write_bytes(b'')

    with pytest.raises(StorageIOError) as exc_info:
        list_directory(file_path)

    assert exc_info.value.kind is IOErrorKind.OTHER
