"""
Django REST Framework serializers for authentication app.
"""

from rest_framework import serializers
from .models import VoterAuthorization


class AuthorizeVoterSerializer(serializers.Serializer):
    """
    Request body for authorizing a voter.
    Blank identities are accepted here and rejected by the ledger,
    so a non-authority caller still gets not_authority first.
    """
    identity = serializers.CharField(max_length=255, allow_blank=True)


class VoterAuthorizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = VoterAuthorization
        fields = ['identity', 'authorized_at']
