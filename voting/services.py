"""
Ledger operations.

VotingLedger is the single entry point for every state change. Each
mutating method runs in its own transaction and starts by locking the
LedgerState row, so concurrent callers are applied one at a time and a
raised guard error rolls back everything the method wrote.
"""
from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from authentication.identity import MAX_IDENTITY_LENGTH, is_null_identity, normalize_identity
from authentication.models import VoterAuthorization

from .exceptions import (
    AlreadyVoted,
    CandidateNameTooLong,
    DurationTooLong,
    EmptyCandidateName,
    InvalidVoterIdentity,
    LedgerAlreadyInitialized,
    NonPositiveDuration,
    SessionAlreadyInactive,
    SessionInactive,
    VoterAlreadyAuthorized,
    VotingPeriodEnded,
)
from .guards import (
    get_ledger_state,
    get_valid_candidate,
    get_valid_session,
    require_authority,
    require_authorized_voter,
)
from .models import Candidate, LedgerEvent, LedgerState, VoteRecord, VotingSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionResults:
    candidate_names: list[str]
    vote_counts: list[int]
    total_votes: int


@dataclass(frozen=True)
class CandidateInfo:
    name: str
    vote_count: int


class VotingLedger:
    """
    Role object for the voting ledger.

    The authority is read from the persisted LedgerState; the clock is
    injected so the voting window can be exercised deterministically.

    Example:
        >>> VotingLedger.initialize("0xauthority")
        >>> ledger = VotingLedger()
        >>> session_id = ledger.create_session(caller="0xauthority", title="Board", duration=3600)
    """

    def __init__(self, clock=None):
        self.clock = clock or timezone.now

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    @classmethod
    @transaction.atomic
    def initialize(cls, authority, now=None):
        """
        Create the ledger and fix its authority. Can only happen once.
        """
        if is_null_identity(authority):
            raise InvalidVoterIdentity("Authority identity cannot be null")
        if LedgerState.objects.select_for_update().filter(pk=LedgerState.SINGLETON_ID).exists():
            raise LedgerAlreadyInitialized()

        state = LedgerState.objects.create(
            pk=LedgerState.SINGLETON_ID,
            authority=normalize_identity(authority),
            initialized_at=now or timezone.now(),
        )
        logger.info(f"Ledger initialized with authority {state.authority}")
        return state

    def authority(self):
        return get_ledger_state().authority

    def _emit(self, state, kind, now, session_index=None, candidate_index=None,
              identity='', **payload):
        event = LedgerEvent.objects.create(
            sequence=state.event_count,
            kind=kind,
            session_index=session_index,
            candidate_index=candidate_index,
            identity=identity,
            payload=payload,
            emitted_at=now,
        )
        state.event_count += 1
        return event

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_session(self, *, caller, title, duration):
        """
        Open a new voting session lasting `duration` seconds from now.

        Returns:
            int: the new session id
        """
        state = get_ledger_state(lock=True)
        require_authority(state, caller)
        if duration <= 0:
            raise NonPositiveDuration(f"Duration must be positive, got {duration}")
        if duration > VotingSession.MAX_DURATION:
            raise DurationTooLong(f"Duration cannot exceed {VotingSession.MAX_DURATION} seconds, got {duration}")

        now = self.clock()
        try:
            end_time = now + datetime.timedelta(seconds=duration)
        except OverflowError:
            raise DurationTooLong(f"Voting period starting at {now} cannot last {duration} seconds")

        voting_session = VotingSession.objects.create(
            index=state.session_count,
            title=title or '',
            start_time=now,
            end_time=end_time,
        )
        state.session_count += 1
        self._emit(
            state, LedgerEvent.SESSION_CREATED, now,
            session_index=voting_session.index,
            title=voting_session.title,
        )
        state.save(update_fields=['session_count', 'event_count'])

        logger.info(f"Voting session created: {voting_session.index} - {voting_session.title}")
        return voting_session.index

    @transaction.atomic
    def end_session(self, *, caller, session_id):
        """
        Permanently deactivate a session. Ending twice is an error.
        """
        state = get_ledger_state(lock=True)
        require_authority(state, caller)
        voting_session = get_valid_session(session_id, lock=True)
        if not voting_session.is_active:
            raise SessionAlreadyInactive(f"Voting session {voting_session.index} has already ended")

        voting_session.is_active = False
        voting_session.save(update_fields=['is_active'])
        self._emit(state, LedgerEvent.SESSION_ENDED, self.clock(), session_index=voting_session.index)
        state.save(update_fields=['event_count'])

        logger.info(f"Voting session ended: {voting_session.index} - {voting_session.title}")

    # ------------------------------------------------------------------
    # Candidates
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_candidate(self, *, caller, session_id, name):
        """
        Append a candidate to an active session.

        Returns:
            int: the candidate id within the session
        """
        state = get_ledger_state(lock=True)
        require_authority(state, caller)
        voting_session = get_valid_session(session_id, lock=True)
        if not voting_session.is_active:
            raise SessionInactive(f"Voting session {voting_session.index} is not active")
        if not name or not name.strip():
            raise EmptyCandidateName()
        if len(name) > Candidate.NAME_MAX_LENGTH:
            raise CandidateNameTooLong(f"Candidate name cannot exceed {Candidate.NAME_MAX_LENGTH} characters")

        candidate = Candidate.objects.create(
            voting_session=voting_session,
            index=voting_session.candidate_count,
            name=name,
        )
        voting_session.candidate_count += 1
        voting_session.save(update_fields=['candidate_count'])
        self._emit(
            state, LedgerEvent.CANDIDATE_ADDED, self.clock(),
            session_index=voting_session.index,
            candidate_index=candidate.index,
            name=candidate.name,
        )
        state.save(update_fields=['event_count'])

        logger.info(
            f"Candidate added - session: {voting_session.index}, "
            f"candidate: {candidate.index} - {candidate.name}"
        )
        return candidate.index

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    @transaction.atomic
    def authorize_voter(self, *, caller, identity):
        """
        Grant `identity` the right to vote. There is no way to revoke it.
        """
        state = get_ledger_state(lock=True)
        require_authority(state, caller)
        if is_null_identity(identity):
            raise InvalidVoterIdentity(f"Invalid voter identity {identity!r}")

        identity = normalize_identity(identity)
        if len(identity) > MAX_IDENTITY_LENGTH:
            raise InvalidVoterIdentity(f"Voter identity cannot exceed {MAX_IDENTITY_LENGTH} characters")
        if VoterAuthorization.is_authorized(identity):
            raise VoterAlreadyAuthorized(f"Voter {identity} is already authorized")

        now = self.clock()
        VoterAuthorization.objects.create(identity=identity, authorized_at=now)
        self._emit(state, LedgerEvent.VOTER_AUTHORIZED, now, identity=identity)
        state.save(update_fields=['event_count'])

        logger.info(f"Voter authorized: {identity}")

    def is_authorized(self, identity):
        if is_null_identity(identity):
            return False
        return VoterAuthorization.is_authorized(normalize_identity(identity))

    # ------------------------------------------------------------------
    # Voting
    # ------------------------------------------------------------------

    @transaction.atomic
    def cast_vote(self, *, caller, session_id, candidate_id):
        """
        Record the caller's single vote in a session.

        All checks run before any write:
        1. caller is an authorized voter
        2. session exists
        3. session is active
        4. voting period has not ended
        5. caller has not voted in this session yet
        6. candidate exists

        The vote record, the candidate count and the session total are then
        updated together.
        """
        state = get_ledger_state(lock=True)
        require_authorized_voter(caller)
        voter = normalize_identity(caller)

        voting_session = get_valid_session(session_id, lock=True)
        if not voting_session.is_active:
            raise SessionInactive(f"Voting session {voting_session.index} is not active")

        now = self.clock()
        if now > voting_session.end_time:
            raise VotingPeriodEnded(f"Voting session {voting_session.index} ended at {voting_session.end_time}")

        already_voted = VoteRecord.objects.select_for_update().filter(
            voting_session=voting_session,
            voter=voter
        ).exists()
        if already_voted:
            logger.warning(f"Voter {voter} attempted to vote twice in session {voting_session.index}")
            raise AlreadyVoted(f"Voter {voter} has already voted in session {voting_session.index}")

        candidate = get_valid_candidate(voting_session, candidate_id, lock=True)

        VoteRecord.objects.create(voting_session=voting_session, voter=voter, cast_at=now)
        candidate.vote_count += 1
        candidate.save(update_fields=['vote_count'])
        voting_session.total_votes += 1
        voting_session.save(update_fields=['total_votes'])
        self._emit(
            state, LedgerEvent.VOTE_CAST, now,
            session_index=voting_session.index,
            candidate_index=candidate.index,
            identity=voter,
        )
        state.save(update_fields=['event_count'])

        logger.info(
            f"Vote cast successfully - voter: {voter}, "
            f"session: {voting_session.index}, candidate: {candidate.index}"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_session(self, session_id):
        return get_valid_session(session_id)

    def list_sessions(self):
        return VotingSession.objects.order_by('index')

    def get_results(self, session_id):
        """
        Tally of a session: names and counts in candidate order plus the total.
        Available at any time, before or after the session ends.
        """
        voting_session = get_valid_session(session_id)
        candidates = list(voting_session.candidates.order_by('index').values_list('name', 'vote_count'))
        return SessionResults(
            candidate_names=[name for name, _ in candidates],
            vote_counts=[count for _, count in candidates],
            total_votes=voting_session.total_votes,
        )

    def has_voted(self, session_id, identity):
        voting_session = get_valid_session(session_id)
        return VoteRecord.objects.filter(
            voting_session=voting_session,
            voter=normalize_identity(identity)
        ).exists()

    def get_candidate(self, session_id, candidate_id):
        voting_session = get_valid_session(session_id)
        candidate = get_valid_candidate(voting_session, candidate_id)
        return CandidateInfo(name=candidate.name, vote_count=candidate.vote_count)

    def list_events(self, after=None):
        """Events in emission order, optionally only those after a sequence number."""
        events = LedgerEvent.objects.order_by('sequence')
        if after is not None:
            events = events.filter(sequence__gt=after)
        return events
