"""
Django REST Framework serializers for voting app.

Request serializers only check the shape of the payload (presence and
types, plus the duration cap that keeps end times representable). Ledger
preconditions such as a positive duration or a non-empty name are enforced
by VotingLedger, so the first failing guard is the one reported.
"""

from rest_framework import serializers
from .models import VotingSession, Candidate, LedgerEvent


class CandidateSerializer(serializers.ModelSerializer):
    candidate_id = serializers.IntegerField(source='index', read_only=True)

    class Meta:
        model = Candidate
        fields = ['candidate_id', 'name', 'vote_count']


class VotingSessionSerializer(serializers.ModelSerializer):
    """
    Serializer for voting sessions.

    is_active is the stored flag; is_open also takes the end time into
    account. A session past its end time reports is_active=True and
    is_open=False until the authority ends it.
    """
    session_id = serializers.IntegerField(source='index', read_only=True)
    is_open = serializers.SerializerMethodField()

    class Meta:
        model = VotingSession
        fields = [
            'session_id',
            'title',
            'start_time',
            'end_time',
            'is_active',
            'is_open',
            'candidate_count',
            'total_votes',
        ]

    def get_is_open(self, obj):
        now = self.context.get('now')
        if now is None:
            return None
        return obj.is_open(now)


class VotingSessionDetailSerializer(VotingSessionSerializer):
    candidates = CandidateSerializer(many=True, read_only=True)

    class Meta(VotingSessionSerializer.Meta):
        fields = VotingSessionSerializer.Meta.fields + ['candidates']


class CreateSessionSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, allow_blank=True)
    duration = serializers.IntegerField(
        max_value=VotingSession.MAX_DURATION,
        help_text="Length of the voting period in seconds"
    )


class AddCandidateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, allow_blank=True)


class CastVoteSerializer(serializers.Serializer):
    candidate_id = serializers.IntegerField()


class ResultsSerializer(serializers.Serializer):
    """
    Parallel sequences of names and counts, in candidate order, plus the total.
    """
    session_id = serializers.IntegerField()
    candidate_names = serializers.ListField(child=serializers.CharField())
    vote_counts = serializers.ListField(child=serializers.IntegerField())
    total_votes = serializers.IntegerField()


class LedgerEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = LedgerEvent
        fields = [
            'sequence',
            'kind',
            'session_index',
            'candidate_index',
            'identity',
            'payload',
            'emitted_at',
        ]
