"""Tests for cleanup_uploads management command."""

import os
import time
from io import StringIO

import pytest
from django.core.management import call_command

_OLD = time.time() - 48 * 3600


@pytest.fixture
def temporaries(hub_root):
    """Create one stale and one recent upload temporary.

    Returns:
        Tuple of (stale, recent) paths.
    """
    nested = hub_root / 'docs'
    nested.mkdir()
    stale = nested / '.upload-0000aaaa.part'
    stale.write_bytes(b'stale')
    os.utime(stale, (_OLD, _OLD))
    recent = hub_root / '.upload-1111bbbb.part'
    recent.write_bytes(b'recent')
    return stale, recent


class TestCleanupUploadsCommand:
    """Tests for cleanup_uploads management command."""

    def test_removes_stale_temporaries(self, temporaries):
        """Test that temporaries older than the cutoff are deleted."""
        stale, recent = temporaries

        out = StringIO()
        call_command('cleanup_uploads', stdout=out)

        assert not stale.exists()
        assert recent.exists()
        assert 'Removed 1 temporary uploads, 0 failed' in out.getvalue()

    def test_keeps_regular_files(self, hub_root, temporaries):
        """Test that finished uploads are never touched, however old."""
        finished = hub_root / 'report.pdf'
        finished.write_bytes(b'%PDF')
        os.utime(finished, (_OLD, _OLD))

        call_command('cleanup_uploads', stdout=StringIO())

        assert finished.read_bytes() == b'%PDF'

    def test_dry_run(self, temporaries):
        """Test that dry run reports without deleting."""
        stale, _ = temporaries

        out = StringIO()
        call_command('cleanup_uploads', '--dry-run', stdout=out)

        assert stale.exists()
        assert f'Would delete: {stale}' in out.getvalue()
        assert 'Would remove 1 temporary uploads' in out.getvalue()

    def test_custom_max_age(self, temporaries):
        """Test overriding the age threshold."""
        stale, recent = temporaries

        call_command(
            'cleanup_uploads', '--max-age-hours', '72', stdout=StringIO(),
        )

        assert stale.exists()
        assert recent.exists()

    def test_missing_upload_root(self, upload_base):
        """Test that a missing upload root is not an error."""
        out = StringIO()
        call_command('cleanup_uploads', stdout=out)

        assert 'Removed 0 temporary uploads, 0 failed' in out.getvalue()
