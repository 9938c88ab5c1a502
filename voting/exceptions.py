"""
Ledger errors.

Every guard failure raises exactly one of these. Raising inside the
operation's transaction rolls back any pending write, so callers never
observe a partial change.
"""


class LedgerError(Exception):
    """Base class for all ledger guard failures."""
    code = 'ledger_error'
    status_code = 400
    default_detail = 'Ledger operation rejected'

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class LedgerNotInitialized(LedgerError):
    code = 'ledger_not_initialized'
    status_code = 503
    default_detail = 'The ledger has not been initialized with an authority'


class LedgerAlreadyInitialized(LedgerError):
    code = 'ledger_already_initialized'
    status_code = 409
    default_detail = 'The ledger already has an authority'


class NotAuthority(LedgerError):
    code = 'not_authority'
    status_code = 403
    default_detail = 'Only the authority can perform this operation'


class NotAuthorizedVoter(LedgerError):
    code = 'not_authorized_voter'
    status_code = 403
    default_detail = 'Caller is not an authorized voter'


class InvalidSessionId(LedgerError):
    code = 'invalid_session_id'
    status_code = 404
    default_detail = 'Voting session does not exist'


class InvalidCandidateId(LedgerError):
    code = 'invalid_candidate_id'
    status_code = 404
    default_detail = 'Candidate does not exist in this session'


class SessionInactive(LedgerError):
    code = 'session_inactive'
    status_code = 409
    default_detail = 'Voting session is not active'


class VotingPeriodEnded(LedgerError):
    code = 'voting_period_ended'
    status_code = 409
    default_detail = 'Voting period has ended'


class AlreadyVoted(LedgerError):
    code = 'already_voted'
    status_code = 409
    default_detail = 'Caller has already voted in this session'


class EmptyCandidateName(LedgerError):
    code = 'empty_candidate_name'
    status_code = 400
    default_detail = 'Candidate name cannot be empty'


class NonPositiveDuration(LedgerError):
    code = 'non_positive_duration'
    status_code = 400
    default_detail = 'Duration must be greater than zero'


class VoterAlreadyAuthorized(LedgerError):
    code = 'voter_already_authorized'
    status_code = 409
    default_detail = 'Voter is already authorized'


class InvalidVoterIdentity(LedgerError):
    code = 'invalid_voter_identity'
    status_code = 400
    default_detail = 'Invalid voter identity'


class SessionAlreadyInactive(LedgerError):
    code = 'session_already_inactive'
    status_code = 409
    default_detail = 'Voting session has already ended'


class DurationTooLong(LedgerError):
    code = 'duration_too_long'
    status_code = 400
    default_detail = 'Duration exceeds the longest supported voting period'


class CandidateNameTooLong(LedgerError):
    code = 'candidate_name_too_long'
    status_code = 400
    default_detail = 'Candidate name is too long'
