"""URL configuration for files app."""

from django.urls import path

from server.apps.files import views

app_name = 'files'

urlpatterns = [
    path('', views.index, name='index'),
    path('na', views.not_assigned, name='not_assigned'),
    path('files/browser', views.file_browser, name='browser'),
    path('files/upload', views.upload_files, name='upload'),
    path('folder/create', views.create_folder, name='create_folder'),
    path(
        'upload/<int:url_hub_id>/<path:file_path>',
        views.download,
        name='download',
    ),
]
