"""
URL configuration for ledger_voting_api project.
"""
from django.contrib import admin
from django.urls import path, include
from django.http import JsonResponse

admin.site.site_header = "Voting Ledger - Administration"
admin.site.site_title = "Voting Ledger Admin"
admin.site.index_title = "Voting Ledger"


def health_check(request):
    """Simple health check endpoint"""
    return JsonResponse({
        'status': 'ok',
        'service': 'voting-ledger-api',
        'version': '1.0.0'
    })


urlpatterns = [
    # Admin panel (read-only views of the ledger)
    path('admin/', admin.site.urls),

    # Health check
    path('health/', health_check, name='health_check'),

    # API endpoints
    path('api/auth/', include('authentication.urls')),
    path('api/', include('voting.urls')),
]
