"""Views of the server-rendered file browser.

Views only translate between HTTP and ``FileBrowser``: they look up the
caller's hub, pass the raw ``path`` parameter through and map typed
errors to status codes and flash messages.
"""

import functools
import logging
from collections.abc import Callable
from typing import Final
from urllib.parse import urlencode

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import (
    FileResponse,
    Http404,
    HttpRequest,
    HttpResponse,
    HttpResponseRedirect,
)
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST

from server.apps.files.exceptions import (
    FilesError,
    FolderConflictError,
    InvalidFolderNameError,
    IOErrorKind,
    PathError,
    StorageIOError,
    UploadConflictError,
    UploadTooLargeError,
)
from server.apps.files.forms import CreateFolderForm, UploadFileForm
from server.apps.files.infrastructure.metadata import detect_mime_type
from server.apps.files.infrastructure.paths import split_segments
from server.apps.files.logic.file_browser import get_file_browser
from server.apps.files.models import HubMembership
from server.apps.files.uploadhandlers import upload_limit_exceeded

logger = logging.getLogger(__name__)

_PATH_PARAM: Final = 'path'
_NO_ACCESS_MESSAGE: Final = 'Insufficient permissions.'

# Checked in order, first match wins
_ERROR_STATUSES: Final = (
    (UploadTooLargeError, 413, 'File is too large.'),
    (UploadConflictError, 409, 'Could not find a free name for the file.'),
    (FolderConflictError, 409, 'A file with this name already exists.'),
    (InvalidFolderNameError, 400, 'Invalid folder name.'),
    (PathError, 400, 'Invalid path.'),
)

_HubView = Callable[..., HttpResponse]


def hub_member_required(view: _HubView) -> _HubView:
    """Require a logged-in user with the files role and a hub.

    The wrapped view receives the user's ``hub_id`` as first argument
    after the request.

    Args:
        view: View function taking ``(request, hub_id, ...)``.

    Returns:
        Wrapped view.
    """

    @login_required
    @functools.wraps(view)
    def wrapper(
        request: HttpRequest,
        *args: object,
        **kwargs: object,
    ) -> HttpResponse:
        hub_id = _get_hub_id(request)
        if hub_id is None:
            messages.error(request, _NO_ACCESS_MESSAGE)
            return redirect('files:not_assigned')
        return view(request, hub_id, *args, **kwargs)

    return wrapper


@require_GET
@hub_member_required
def index(request: HttpRequest, hub_id: int) -> HttpResponse:
    """Render the file browser page."""
    return render(
        request,
        'files/index.html',
        {
            'current_page': 'index',
            'initial_path': request.GET.get(_PATH_PARAM, ''),
        },
    )


@require_GET
@hub_member_required
def file_browser(request: HttpRequest, hub_id: int) -> HttpResponse:
    """Render the listing fragment for ``?path=``."""
    path = request.GET.get(_PATH_PARAM, '')
    try:
        entries = get_file_browser().list_entries(hub_id, path)
    except FilesError as error:
        return _error_response(request, error)

    segments = split_segments(path)
    return render(
        request,
        'files/browser.html',
        {
            'entries': entries,
            'hub_id': hub_id,
            'current_path': '/'.join(segments),
            'parent_path': '/'.join(segments[:-1]) if segments else None,
            'breadcrumbs': _breadcrumbs(segments),
        },
    )


@require_POST
@hub_member_required
def upload_files(request: HttpRequest, hub_id: int) -> HttpResponse:
    """Store an uploaded file in ``?path=`` (or the form's ``path``)."""
    form = UploadFileForm(request.POST, request.FILES)
    if upload_limit_exceeded(request):
        return _error_response(
            request,
            UploadTooLargeError(settings.FILES_MAX_UPLOAD_SIZE),
        )
    if not form.is_valid():
        return HttpResponse(form.errors.as_text(), status=400)

    path = request.GET.get(_PATH_PARAM) or form.cleaned_data['path']
    uploaded = form.cleaned_data['image']
    try:
        entry = get_file_browser().upload(
            hub_id,
            path,
            uploaded.name,
            uploaded,
        )
    except FilesError as error:
        return _error_response(request, error)

    messages.success(request, f'File {entry.name} uploaded.')
    return _redirect_to_browser(path)


@require_POST
@hub_member_required
def create_folder(request: HttpRequest, hub_id: int) -> HttpResponse:
    """Create a folder inside ``?path=``."""
    form = CreateFolderForm(request.POST)
    if not form.is_valid():
        return HttpResponse(form.errors.as_text(), status=400)

    path = request.GET.get(_PATH_PARAM, '')
    try:
        get_file_browser().create_folder(
            hub_id,
            path,
            form.cleaned_data['name'],
        )
    except FilesError as error:
        return _error_response(request, error)

    messages.success(request, 'Folder created.')
    return _redirect_to_browser(path)


@require_GET
@hub_member_required
def download(
    request: HttpRequest,
    hub_id: int,
    url_hub_id: int,
    file_path: str,
) -> FileResponse:
    """Serve a stored file of the caller's own hub."""
    if url_hub_id != hub_id:
        raise Http404('No such file')

    try:
        target = get_file_browser().open_file(hub_id, file_path)
    except (PathError, StorageIOError) as error:
        raise Http404('No such file') from error

    return FileResponse(
        target.open('rb'),
        content_type=detect_mime_type(target.name),
    )


@require_GET
@login_required
def not_assigned(request: HttpRequest) -> HttpResponse:
    """Page shown to users without access to any hub."""
    return render(
        request,
        'files/not_assigned.html',
        {'current_page': 'index'},
    )


def _get_hub_id(request: HttpRequest) -> int | None:
    user = request.user
    if not user.groups.filter(name=settings.FILES_ACCESS_ROLE).exists():
        return None
    return HubMembership.objects.filter(
        user=user,
    ).values_list('hub_id', flat=True).first()


def _error_response(request: HttpRequest, error: FilesError) -> HttpResponse:
    for error_type, status, message in _ERROR_STATUSES:
        if isinstance(error, error_type):
            messages.error(request, message)
            return HttpResponse(message, status=status)

    is_missing = (
        isinstance(error, StorageIOError)
        and error.kind is IOErrorKind.NOT_FOUND
    )
    if is_missing:
        return HttpResponse('Not found.', status=404)

    logger.error('File operation failed: %s', error, exc_info=error)
    messages.error(request, 'Storage error, please try again later.')
    return HttpResponse('Storage error.', status=500)


def _redirect_to_browser(path: str) -> HttpResponseRedirect:
    url = reverse('files:browser')
    if path:
        url = f'{url}?{urlencode({_PATH_PARAM: path})}'
    return HttpResponseRedirect(url, status=303)


def _breadcrumbs(segments: list[str]) -> list[tuple[str, str]]:
    return [
        (segment, '/'.join(segments[:depth]))
        for depth, segment in enumerate(segments, start=1)
    ]
