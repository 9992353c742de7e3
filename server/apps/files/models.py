"""Database models for files app.

Files themselves are never stored in the database: the directory tree
under ``FILES_UPLOAD_ROOT`` is the only source of truth. The database
only records which hub a user belongs to.
"""

from typing import final, override

from django.contrib.auth import get_user_model
from django.db import models

User = get_user_model()


@final
class HubMembership(models.Model):
    """Hub (tenant) a user works in.

    All file operations of the user are scoped to
    ``{FILES_UPLOAD_ROOT}/{hub_id}``; users of the same hub share files.
    """

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='hub_membership',
        primary_key=True,
    )

    hub_id = models.PositiveIntegerField(
        db_index=True,
        help_text='Identifier of the hub whose files the user can access',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'Hub Membership'  # type: ignore[mutable-override]
        verbose_name_plural = 'Hub Memberships'  # type: ignore[mutable-override]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username}: hub {self.hub_id}'
