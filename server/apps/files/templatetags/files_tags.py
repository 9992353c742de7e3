"""Template helpers for the file browser."""

from urllib.parse import unquote

from django import template
from django.urls import reverse

register = template.Library()


@register.simple_tag
def download_url(hub_id: int, relative_url: str) -> str:
    """Build the download link of a listed file.

    ``relative_url`` is already percent-encoded; it is decoded first so
    that ``reverse`` encodes it exactly once.

    Args:
        hub_id: Hub the file belongs to.
        relative_url: Entry URL relative to the hub root.

    Returns:
        Absolute path of the ``files:download`` route.
    """
    return reverse(
        'files:download',
        kwargs={'url_hub_id': hub_id, 'file_path': unquote(relative_url)},
    )
