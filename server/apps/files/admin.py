"""Django admin configuration for files app."""

from django.contrib import admin

from server.apps.files.models import HubMembership


@admin.register(HubMembership)
class HubMembershipAdmin(admin.ModelAdmin[HubMembership]):
    """Admin interface for HubMembership model."""

    list_display = [
        'user',
        'hub_id',
    ]

    list_filter = [
        'hub_id',
    ]

    search_fields = [
        'user__username',
        'user__email',
    ]

    raw_id_fields = ['user']
