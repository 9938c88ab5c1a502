"""
Authentication views - caller identity and voter authorization
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
import logging

from voting.exceptions import LedgerError
from voting.views import LedgerViewMixin
from .identity import normalize_identity
from .models import VoterAuthorization
from .serializers import AuthorizeVoterSerializer, VoterAuthorizationSerializer

logger = logging.getLogger(__name__)


class WhoAmIView(APIView):
    """
    Return the identity carried by the caller's bearer token.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        ledger_identity = request.user.identity
        return Response({
            'identity': ledger_identity,
            'is_authorized_voter': VoterAuthorization.is_authorized(ledger_identity)
        })


class VoterAuthorizationListView(LedgerViewMixin, APIView):
    """
    Authorize a voter (authority only). Authorizations cannot be revoked.

    Request body:
    - identity: str
    """

    def post(self, request):
        serializer = AuthorizeVoterSerializer(data=request.data)
        if not serializer.is_valid():
            return self.invalid_request_response(serializer.errors)

        try:
            self.get_ledger().authorize_voter(
                caller=request.user.identity,
                identity=serializer.validated_data['identity'],
            )
            authorization = VoterAuthorization.objects.get(
                identity=normalize_identity(serializer.validated_data['identity'])
            )

            return Response(
                VoterAuthorizationSerializer(authorization).data,
                status=status.HTTP_201_CREATED
            )

        except LedgerError as e:
            return self.ledger_error_response(e)
        except Exception as e:
            return self.server_error_response('Failed to authorize voter', e)


class VoterAuthorizationDetailView(LedgerViewMixin, APIView):
    """
    Whether an identity is an authorized voter. Public.
    """

    def get(self, request, identity):
        try:
            return Response({
                'identity': normalize_identity(identity),
                'is_authorized': self.get_ledger().is_authorized(identity)
            })

        except Exception as e:
            return self.server_error_response('Failed to retrieve voter authorization', e)
