from django.db import models


class LedgerState(models.Model):
    """
    Singleton row holding the authority and the ledger counters.

    Every mutating operation locks this row first, which serializes all
    writes into a single total order.
    """
    SINGLETON_ID = 1

    authority = models.CharField(
        max_length=255,
        verbose_name="Authority",
        help_text="The only identity allowed to administer the ledger"
    )
    session_count = models.PositiveIntegerField(default=0, verbose_name="Sessions")
    event_count = models.PositiveIntegerField(default=0, verbose_name="Events")
    initialized_at = models.DateTimeField(verbose_name="Initialized At")

    class Meta:
        verbose_name = "Ledger State"
        verbose_name_plural = "Ledger State"

    def __str__(self):
        return f"Ledger (authority {self.authority})"


class VotingSession(models.Model):
    """
    A time-bounded voting round with its own candidates and vote record.

    Ending the session is the only way is_active becomes False: passing
    end_time only blocks new votes.
    """
    # ~100 years; keeps end_time inside the datetime range
    MAX_DURATION = 100 * 365 * 24 * 60 * 60

    index = models.PositiveIntegerField(
        unique=True,
        verbose_name="Session Id",
        help_text="Dense, zero-based, never reused"
    )
    title = models.CharField(max_length=255, blank=True, verbose_name="Title")
    start_time = models.DateTimeField(verbose_name="Start Time")
    end_time = models.DateTimeField(verbose_name="End Time")
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active",
        help_text="Set to False only by ending the session"
    )
    candidate_count = models.PositiveIntegerField(default=0, verbose_name="Candidates")
    total_votes = models.PositiveIntegerField(default=0, verbose_name="Total Votes")

    class Meta:
        verbose_name = "Voting Session"
        verbose_name_plural = "Voting Sessions"
        ordering = ['index']

    def __str__(self):
        return f"#{self.index} {self.title}"

    def is_open(self, now):
        """Check if a vote cast at `now` would pass the lifecycle checks"""
        return self.is_active and now <= self.end_time


class Candidate(models.Model):
    """
    A nominee within one voting session. Name and index never change;
    vote_count only goes up.
    """
    NAME_MAX_LENGTH = 255

    voting_session = models.ForeignKey(
        VotingSession,
        on_delete=models.PROTECT,
        related_name='candidates',
        verbose_name="Voting Session"
    )
    index = models.PositiveIntegerField(verbose_name="Candidate Id")
    name = models.CharField(max_length=NAME_MAX_LENGTH, verbose_name="Name")
    vote_count = models.PositiveIntegerField(default=0, verbose_name="Votes")

    class Meta:
        verbose_name = "Candidate"
        verbose_name_plural = "Candidates"
        ordering = ['voting_session', 'index']
        constraints = [
            models.UniqueConstraint(
                fields=['voting_session', 'index'],
                name='unique_candidate_index_per_session'
            ),
        ]

    def __str__(self):
        return f"{self.name} (#{self.index}) - {self.voting_session.title}"


class VoteRecord(models.Model):
    """
    Records that an identity has voted in a session.
    At most one row per (session, voter) pair.
    """
    voting_session = models.ForeignKey(
        VotingSession,
        on_delete=models.PROTECT,
        related_name='vote_records',
        verbose_name="Voting Session"
    )
    voter = models.CharField(max_length=255, verbose_name="Voter")
    cast_at = models.DateTimeField(verbose_name="Cast At")

    class Meta:
        verbose_name = "Vote Record"
        verbose_name_plural = "Vote Records"
        ordering = ['voting_session', 'cast_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['voting_session', 'voter'],
                name='unique_vote_per_voter_per_session'
            ),
        ]
        indexes = [
            models.Index(fields=['voter'], name='vote_record_voter_idx'),
        ]

    def __str__(self):
        return f"{self.voter} voted in #{self.voting_session.index}"


class LedgerEvent(models.Model):
    """
    Append-only notification log consumed by external watchers.
    """
    SESSION_CREATED = 'session_created'
    CANDIDATE_ADDED = 'candidate_added'
    VOTE_CAST = 'vote_cast'
    VOTER_AUTHORIZED = 'voter_authorized'
    SESSION_ENDED = 'session_ended'

    KIND_CHOICES = [
        (SESSION_CREATED, 'Session Created'),
        (CANDIDATE_ADDED, 'Candidate Added'),
        (VOTE_CAST, 'Vote Cast'),
        (VOTER_AUTHORIZED, 'Voter Authorized'),
        (SESSION_ENDED, 'Session Ended'),
    ]

    sequence = models.PositiveIntegerField(unique=True, verbose_name="Sequence")
    kind = models.CharField(max_length=32, choices=KIND_CHOICES, verbose_name="Kind")
    session_index = models.PositiveIntegerField(null=True, blank=True, verbose_name="Session Id")
    candidate_index = models.PositiveIntegerField(null=True, blank=True, verbose_name="Candidate Id")
    identity = models.CharField(max_length=255, blank=True, verbose_name="Identity")
    payload = models.JSONField(default=dict, blank=True, verbose_name="Payload")
    emitted_at = models.DateTimeField(verbose_name="Emitted At")

    class Meta:
        verbose_name = "Ledger Event"
        verbose_name_plural = "Ledger Events"
        ordering = ['sequence']
        indexes = [
            models.Index(fields=['kind'], name='ledger_event_kind_idx'),
            models.Index(fields=['session_index'], name='ledger_event_session_idx'),
        ]

    def __str__(self):
        return f"{self.sequence}: {self.kind}"
