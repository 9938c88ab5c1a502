"""
Voting app URLs - Sessions, candidates, votes, results, events
"""
from django.urls import path
from .views import (
    CandidateDetailView,
    CandidateListView,
    CastVoteView,
    EndSessionView,
    HasVotedView,
    LedgerEventListView,
    VotingResultsView,
    VotingSessionDetailView,
    VotingSessionListView,
)

app_name = 'voting'

urlpatterns = [
    # GET → all sessions, POST → create session (authority)
    path('voting/sessions/', VotingSessionListView.as_view(), name='voting_sessions'),
    path('voting/sessions/<int:session_id>/', VotingSessionDetailView.as_view(), name='voting_session_detail'),
    path('voting/sessions/<int:session_id>/end/', EndSessionView.as_view(), name='end_session'),

    path('voting/sessions/<int:session_id>/candidates/', CandidateListView.as_view(), name='candidates'),
    path(
        'voting/sessions/<int:session_id>/candidates/<int:candidate_id>/',
        CandidateDetailView.as_view(),
        name='candidate_detail'
    ),

    path('voting/sessions/<int:session_id>/vote/', CastVoteView.as_view(), name='cast_vote'),
    path('voting/sessions/<int:session_id>/results/', VotingResultsView.as_view(), name='voting_results'),
    path('voting/sessions/<int:session_id>/voters/<str:identity>/', HasVotedView.as_view(), name='has_voted'),

    # Notification log: GET /api/voting/events/?after=41
    path('voting/events/', LedgerEventListView.as_view(), name='ledger_events'),
]
