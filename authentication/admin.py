"""
Admin configuration for authentication app
"""
from django.contrib import admin
from .models import VoterAuthorization


@admin.register(VoterAuthorization)
class VoterAuthorizationAdmin(admin.ModelAdmin):
    """
    Admin interface for VoterAuthorization model.
    Authorizations are granted through the API only and never revoked.
    """
    list_display = ('identity', 'authorized_at')
    list_filter = ('authorized_at',)
    search_fields = ('identity',)
    ordering = ('-authorized_at',)
    readonly_fields = ('identity', 'authorized_at')

    def has_add_permission(self, request):
        """Authorizations can only be added through the API"""
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        """There is no deauthorization"""
        return False
