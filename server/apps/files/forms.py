"""Forms for file browser requests."""

from typing import Final

from django import forms

_FOLDER_NAME_MAX_LENGTH: Final = 1024


class UploadFileForm(forms.Form):
    """Multipart upload of a single file."""

    image = forms.FileField(allow_empty_file=True)
    path = forms.CharField(required=False, strip=False)


class CreateFolderForm(forms.Form):
    """New folder name, may contain '/' for nested folders."""

    name = forms.CharField(max_length=_FOLDER_NAME_MAX_LENGTH)
