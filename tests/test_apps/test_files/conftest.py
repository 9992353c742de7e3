"""Shared fixtures for files app tests."""

from io import BytesIO

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group

from server.apps.files.infrastructure.tenant_root import TenantRootResolver
from server.apps.files.logic.file_browser import FileBrowser
from server.apps.files.models import HubMembership

User = get_user_model()

_HUB_ID = 42
_OTHER_HUB_ID = 7


@pytest.fixture
def upload_base(tmp_path, settings):
    """Point FILES_UPLOAD_ROOT at a fresh temporary directory.

    Returns:
        Path of the upload base (not created yet).
    """
    base = tmp_path / 'upload'
    settings.FILES_UPLOAD_ROOT = str(base)
    return base


@pytest.fixture
def resolver(upload_base):
    """Create resolver over the temporary upload base.

    Returns:
        TenantRootResolver instance.
    """
    return TenantRootResolver(upload_base)


@pytest.fixture
def hub_root(resolver):
    """Create the root directory of the test hub.

    Returns:
        Path of the hub root.
    """
    return resolver.resolve(_HUB_ID)


@pytest.fixture
def file_browser(resolver):
    """Create file browser with the default 10 MB ceiling.

    Returns:
        FileBrowser instance.
    """
    return FileBrowser(resolver)


@pytest.fixture
def sample_content():
    """Sample upload stream.

    Returns:
        BytesIO with test data.
    """
    return BytesIO(b'test file content')


@pytest.fixture
def files_group(db):
    """Create the group granting file browser access.

    Returns:
        Group instance.
    """
    return Group.objects.create(name='files')


@pytest.fixture
def user(db, files_group):
    """Create test user with file access in hub 42.

    Returns:
        User instance for testing.
    """
    user = User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )
    user.groups.add(files_group)
    HubMembership.objects.create(user=user, hub_id=_HUB_ID)
    return user


@pytest.fixture
def other_user(db, files_group):
    """Create second test user in another hub for isolation tests.

    Returns:
        Second user instance.
    """
    other = User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )
    other.groups.add(files_group)
    HubMembership.objects.create(user=other, hub_id=_OTHER_HUB_ID)
    return other


@pytest.fixture
def user_client(client, user, upload_base):
    """Django test client logged in as the test user.

    Returns:
        Logged-in Client.
    """
    client.force_login(user)
    return client
