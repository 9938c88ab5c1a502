"""
Authentication app URLs - caller identity and voter authorization
"""
from django.urls import path
from . import views

app_name = 'authentication'

urlpatterns = [
    path('whoami/', views.WhoAmIView.as_view(), name='whoami'),
    path('voters/', views.VoterAuthorizationListView.as_view(), name='voters'),
    path('voters/<str:identity>/', views.VoterAuthorizationDetailView.as_view(), name='voter_detail'),
]
