"""Tests for HubMembership model."""

import pytest
from django.db import IntegrityError

from server.apps.files.models import HubMembership


@pytest.mark.django_db
def test_membership_of_user(user):
    """Test that the fixture user belongs to hub 42."""
    membership = HubMembership.objects.get(user=user)

    assert membership.hub_id == 42
    assert user.hub_membership == membership


@pytest.mark.django_db
def test_one_hub_per_user(user):
    """Test that a user cannot belong to two hubs."""
    with pytest.raises(IntegrityError):
        HubMembership.objects.create(user=user, hub_id=7)


@pytest.mark.django_db
def test_hub_shared_by_users(user, other_user):
    """Test that several users can work in the same hub."""
    HubMembership.objects.filter(user=other_user).update(hub_id=42)

    assert HubMembership.objects.filter(hub_id=42).count() == 2


@pytest.mark.django_db
def test_str_representation(user):
    """Test HubMembership string representation."""
    assert str(user.hub_membership) == 'testuser: hub 42'


@pytest.mark.django_db
def test_deleted_with_user(user):
    """Test that memberships go away with their user."""
    user.delete()

    assert not HubMembership.objects.exists()
