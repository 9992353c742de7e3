"""Management command to remove stale temporary upload files."""

import logging
import os
import time
from pathlib import Path
from typing import Any, Final

from django.conf import settings
from django.core.management.base import BaseCommand

from server.apps.files.infrastructure.listing import is_temp_upload

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR: Final = 3600


class Command(BaseCommand):
    """Delete upload temporaries left behind by crashed processes.

    Uploads clean up their own temporary file on any error, so leftovers
    only appear when a worker is killed mid-upload.
    """

    help = 'Remove temporary upload files older than the configured age'

    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )
        parser.add_argument(
            '--max-age-hours',
            type=int,
            default=settings.FILES_UPLOAD_TEMP_MAX_AGE_HOURS,
            help='Only remove files older than this (default: %(default)s)',
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        dry_run = options['dry_run']
        max_age_hours = options['max_age_hours']
        upload_root = Path(settings.FILES_UPLOAD_ROOT)
        cutoff = time.time() - max_age_hours * _SECONDS_PER_HOUR

        self.stdout.write(
            f'Looking for temporary uploads in {upload_root} '
            f'(older than {max_age_hours} hours)',
        )

        count = 0
        failed = 0
        for temp_path in _find_stale_temporaries(upload_root, cutoff):
            if dry_run:
                self.stdout.write(f'Would delete: {temp_path}')
                count += 1
                continue

            try:
                temp_path.unlink()
            except FileNotFoundError:
                # Finished or cleaned up concurrently
                continue
            except OSError as exc:
                self.stderr.write(f'Failed to delete {temp_path}: {exc}')
                logger.exception(
                    'Failed to delete temporary upload: %s', temp_path,
                )
                failed += 1
                continue
            count += 1
            logger.info('Removed stale temporary upload: %s', temp_path)

        if dry_run:
            self.stdout.write(
                self.style.SUCCESS(f'Would remove {count} temporary uploads'),
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Removed {count} temporary uploads, {failed} failed',
                ),
            )


def _find_stale_temporaries(upload_root: Path, cutoff: float) -> list[Path]:
    stale = []
    if not upload_root.is_dir():
        return stale
    for dirpath, _, filenames in os.walk(upload_root):
        for filename in filenames:
            if not is_temp_upload(filename):
                continue
            candidate = Path(dirpath) / filename
            try:
                modified = candidate.lstat().st_mtime
            except FileNotFoundError:
                continue
            if modified < cutoff:
                stale.append(candidate)
    return sorted(stale)
