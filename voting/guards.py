"""
Access guards composed into every ledger operation.

Guards are stateless: they read the rows they are given (or look them up)
and raise a LedgerError on the first violated precondition. They never
write.
"""
import logging

from authentication.identity import normalize_identity
from authentication.models import VoterAuthorization

from .exceptions import (
    InvalidCandidateId,
    InvalidSessionId,
    LedgerNotInitialized,
    NotAuthority,
    NotAuthorizedVoter,
)
from .models import Candidate, LedgerState, VotingSession

logger = logging.getLogger(__name__)


def get_ledger_state(lock=False):
    """
    Fetch the ledger singleton, optionally locking it for the rest of the
    current transaction.
    """
    queryset = LedgerState.objects.all()
    if lock:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=LedgerState.SINGLETON_ID)
    except LedgerState.DoesNotExist:
        raise LedgerNotInitialized()


def require_authority(state, caller):
    """Reject any caller other than the ledger authority."""
    if normalize_identity(caller) != state.authority:
        logger.warning(f"Rejected administrative call from non-authority {caller!r}")
        raise NotAuthority()


def require_authorized_voter(caller):
    if not VoterAuthorization.is_authorized(normalize_identity(caller)):
        logger.warning(f"Rejected vote from unauthorized identity {caller!r}")
        raise NotAuthorizedVoter()


def _as_index(value):
    """Coerce a session/candidate id to int, or None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        index = int(value)
    except (TypeError, ValueError):
        return None
    return index if index >= 0 else None


def get_valid_session(session_id, lock=False):
    """
    Return the session stored at `session_id`.

    Raises:
        InvalidSessionId: if the id is not below the current session count
    """
    index = _as_index(session_id)
    if index is None:
        raise InvalidSessionId(f"Invalid session id {session_id!r}")

    queryset = VotingSession.objects.all()
    if lock:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(index=index)
    except VotingSession.DoesNotExist:
        raise InvalidSessionId(f"No voting session with id {index}")


def get_valid_candidate(voting_session, candidate_id, lock=False):
    """
    Return candidate `candidate_id` of `voting_session`.

    Candidates are dense, so any id below candidate_count is present.
    """
    index = _as_index(candidate_id)
    if index is None or index >= voting_session.candidate_count:
        raise InvalidCandidateId(
            f"No candidate with id {candidate_id!r} in session {voting_session.index}"
        )

    queryset = Candidate.objects.all()
    if lock:
        queryset = queryset.select_for_update()
    return queryset.get(voting_session=voting_session, index=index)
