"""Main URL mapping configuration file.

Include other URLConfs from external apps using method `include()`.
"""

from django.contrib import admin
from django.contrib.auth.views import LogoutView
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('logout', LogoutView.as_view(), name='logout'),
    path('', include('server.apps.files.urls', namespace='files')),
]
