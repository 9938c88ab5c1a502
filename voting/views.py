"""
Voting views - Sessions, candidates, votes, results and the event log
"""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
import logging

from .exceptions import LedgerError
from .serializers import (
    AddCandidateSerializer,
    CastVoteSerializer,
    CreateSessionSerializer,
    LedgerEventSerializer,
    ResultsSerializer,
    VotingSessionDetailSerializer,
    VotingSessionSerializer,
)
from .services import VotingLedger

logger = logging.getLogger(__name__)


class LedgerViewMixin:
    """
    Shared helpers: ledger construction and error responses.
    """

    def get_ledger(self):
        return VotingLedger()

    def ledger_error_response(self, exc):
        return Response({
            'error': exc.code,
            'detail': exc.detail
        }, status=exc.status_code)

    def invalid_request_response(self, errors):
        return Response({
            'error': 'invalid_request',
            'detail': errors
        }, status=status.HTTP_400_BAD_REQUEST)

    def server_error_response(self, message, exc):
        logger.error(f"{message}: {exc}", exc_info=True)
        return Response({
            'error': message,
            'detail': str(exc)
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class VotingSessionListView(LedgerViewMixin, APIView):
    """
    List all voting sessions (public) or create a new one (authority).

    Examples:
        GET /api/voting/sessions/  → Returns all sessions in id order
        POST /api/voting/sessions/ {"title": "Board Election", "duration": 3600}
    """

    def get(self, request):
        try:
            ledger = self.get_ledger()
            sessions = ledger.list_sessions()
            serializer = VotingSessionSerializer(sessions, many=True, context={'now': ledger.clock()})

            return Response({
                'count': len(serializer.data),
                'sessions': serializer.data
            })

        except Exception as e:
            return self.server_error_response('Failed to retrieve voting sessions', e)

    def post(self, request):
        serializer = CreateSessionSerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request_response(serializer.errors)

        try:
            ledger = self.get_ledger()
            session_id = ledger.create_session(
                caller=request.user.identity,
                title=serializer.validated_data['title'],
                duration=serializer.validated_data['duration'],
            )
            voting_session = ledger.get_session(session_id)

            return Response(
                VotingSessionSerializer(voting_session, context={'now': ledger.clock()}).data,
                status=status.HTTP_201_CREATED
            )

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to create voting session', e)


class VotingSessionDetailView(LedgerViewMixin, APIView):
    """
    Session details including its candidates and their running counts.
    """

    def get(self, request, session_id):
        try:
            ledger = self.get_ledger()
            voting_session = ledger.get_session(session_id)
            serializer = VotingSessionDetailSerializer(voting_session, context={'now': ledger.clock()})
            return Response(serializer.data)

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to retrieve voting session', e)


class EndSessionView(LedgerViewMixin, APIView):
    """
    End a voting session (authority only). Irreversible.
    """

    def post(self, request, session_id):
        try:
            ledger = self.get_ledger()
            ledger.end_session(caller=request.user.identity, session_id=session_id)
            voting_session = ledger.get_session(session_id)

            return Response(VotingSessionSerializer(voting_session, context={'now': ledger.clock()}).data)

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to end voting session', e)


class CandidateListView(LedgerViewMixin, APIView):
    """
    Add a candidate to an active session (authority only).

    Request body:
    - name: str
    """

    def post(self, request, session_id):
        serializer = AddCandidateSerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request_response(serializer.errors)

        try:
            ledger = self.get_ledger()
            candidate_id = ledger.add_candidate(
                caller=request.user.identity,
                session_id=session_id,
                name=serializer.validated_data['name'],
            )

            return Response({
                'session_id': session_id,
                'candidate_id': candidate_id,
                'name': serializer.validated_data['name']
            }, status=status.HTTP_201_CREATED)

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to add candidate', e)


class CandidateDetailView(LedgerViewMixin, APIView):
    """
    Name and running vote count of one candidate. Public.
    """

    def get(self, request, session_id, candidate_id):
        try:
            candidate = self.get_ledger().get_candidate(session_id, candidate_id)

            return Response({
                'session_id': session_id,
                'candidate_id': candidate_id,
                'name': candidate.name,
                'vote_count': candidate.vote_count
            })

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to retrieve candidate', e)


class CastVoteView(LedgerViewMixin, APIView):
    """
    Cast the caller's vote in a session.

    Request body:
    - candidate_id: int

    Returns:
    - success: boolean
    - message: success message
    - session_id / candidate_id: where the vote went
    """

    def post(self, request, session_id):
        serializer = CastVoteSerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request_response(serializer.errors)

        candidate_id = serializer.validated_data['candidate_id']

        try:
            self.get_ledger().cast_vote(
                caller=request.user.identity,
                session_id=session_id,
                candidate_id=candidate_id,
            )

            return Response({
                'success': True,
                'message': 'Vote recorded successfully',
                'session_id': session_id,
                'candidate_id': candidate_id
            }, status=status.HTTP_201_CREATED)

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to cast vote', e)


class VotingResultsView(LedgerViewMixin, APIView):
    """
    Results of a session. Public, before and after the session ends.
    """

    def get(self, request, session_id):
        try:
            results = self.get_ledger().get_results(session_id)
            serializer = ResultsSerializer({
                'session_id': session_id,
                'candidate_names': results.candidate_names,
                'vote_counts': results.vote_counts,
                'total_votes': results.total_votes,
            })
            return Response(serializer.data)

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to retrieve results', e)


class HasVotedView(LedgerViewMixin, APIView):
    """
    Whether an identity has voted in a session. Public.
    """

    def get(self, request, session_id, identity):
        try:
            has_voted = self.get_ledger().has_voted(session_id, identity)

            return Response({
                'session_id': session_id,
                'identity': identity,
                'has_voted': has_voted
            })

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to retrieve vote status', e)


class LedgerEventListView(LedgerViewMixin, APIView):
    """
    Notification log for watchers.

    Query params:
        after (optional): only return events with a greater sequence number
    """

    def get(self, request):
        after = request.GET.get('after')
        if after is not None:
            try:
                after = int(after)
            except ValueError:
                return self.invalid_request_response({'after': ['A valid integer is required.']})

        try:
            events = self.get_ledger().list_events(after=after)
            serializer = LedgerEventSerializer(events, many=True)

            return Response({
                'count': len(serializer.data),
                'events': serializer.data
            })

        except Exception as e:
            return self.server_error_response('Failed to retrieve events', e)
