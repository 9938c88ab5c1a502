import pytest

from voting.exceptions import (
    AlreadyVoted,
    InvalidCandidateId,
    InvalidSessionId,
    NotAuthorizedVoter,
    SessionInactive,
    VotingPeriodEnded,
)
from voting.models import LedgerEvent, VoteRecord, VotingSession

from .conftest import AUTHORITY, OUTSIDER, VOTER_1, VOTER_2


def assert_tally_consistent(session_id):
    voting_session = VotingSession.objects.get(index=session_id)
    counts = [c.vote_count for c in voting_session.candidates.all()]
    assert voting_session.total_votes == sum(counts)
    assert voting_session.vote_records.count() == voting_session.total_votes


def snapshot(ledger, session_id):
    results = ledger.get_results(session_id)
    return (
        results.vote_counts,
        results.total_votes,
        VoteRecord.objects.count(),
        LedgerEvent.objects.count(),
    )


def test_board_election_scenario(ledger, open_session):
    ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)
    ledger.cast_vote(caller=VOTER_2, session_id=open_session, candidate_id=1)

    results = ledger.get_results(open_session)
    assert results.candidate_names == ["Alice", "Bob"]
    assert results.vote_counts == [1, 1]
    assert results.total_votes == 2

    with pytest.raises(AlreadyVoted):
        ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)

    results = ledger.get_results(open_session)
    assert (results.vote_counts, results.total_votes) == ([1, 1], 2)
    assert_tally_consistent(open_session)


def test_vote_effects(ledger, open_session, clock):
    ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=1)

    assert ledger.has_voted(open_session, VOTER_1)
    assert not ledger.has_voted(open_session, VOTER_2)
    assert ledger.get_candidate(open_session, 1).vote_count == 1
    assert ledger.get_session(open_session).total_votes == 1

    record = VoteRecord.objects.get()
    assert (record.voter, record.cast_at) == (VOTER_1, clock())

    event = LedgerEvent.objects.filter(kind=LedgerEvent.VOTE_CAST).get()
    assert (event.session_index, event.candidate_index, event.identity) == (open_session, 1, VOTER_1)


def test_second_vote_for_other_candidate_is_rejected(ledger, open_session):
    ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)
    before = snapshot(ledger, open_session)

    with pytest.raises(AlreadyVoted):
        ledger.cast_vote(caller=' 0xVOTER1', session_id=open_session, candidate_id=1)
    assert snapshot(ledger, open_session) == before


def test_unauthorized_identity_cannot_vote(ledger, open_session):
    before = snapshot(ledger, open_session)

    with pytest.raises(NotAuthorizedVoter):
        ledger.cast_vote(caller=OUTSIDER, session_id=open_session, candidate_id=0)
    assert snapshot(ledger, open_session) == before
    assert not ledger.has_voted(open_session, OUTSIDER)


def test_authority_cannot_vote_unless_authorized(ledger, open_session):
    with pytest.raises(NotAuthorizedVoter):
        ledger.cast_vote(caller=AUTHORITY, session_id=open_session, candidate_id=0)

    ledger.authorize_voter(caller=AUTHORITY, identity=AUTHORITY)
    ledger.cast_vote(caller=AUTHORITY, session_id=open_session, candidate_id=0)
    assert ledger.has_voted(open_session, AUTHORITY)


def test_vote_after_end_time_fails_while_session_stays_active(ledger, open_session, clock):
    clock.advance(3601)
    before = snapshot(ledger, open_session)

    with pytest.raises(VotingPeriodEnded):
        ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)
    assert ledger.get_session(open_session).is_active
    assert snapshot(ledger, open_session) == before


def test_vote_exactly_at_end_time_is_accepted(ledger, open_session, clock):
    clock.advance(3600)
    ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)
    assert ledger.get_results(open_session).total_votes == 1


def test_vote_in_ended_session_fails(ledger, open_session):
    ledger.end_session(caller=AUTHORITY, session_id=open_session)

    with pytest.raises(SessionInactive):
        ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)


def test_vote_for_unknown_candidate_fails(ledger, open_session):
    for candidate_id in (2, -1, 100):
        with pytest.raises(InvalidCandidateId):
            ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=candidate_id)
    assert not ledger.has_voted(open_session, VOTER_1)

    # the failed attempts did not use up the vote
    ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)


def test_vote_in_session_without_candidates(ledger, open_session):
    empty = ledger.create_session(caller=AUTHORITY, title="Empty", duration=60)
    with pytest.raises(InvalidCandidateId):
        ledger.cast_vote(caller=VOTER_1, session_id=empty, candidate_id=0)


def test_unknown_session(ledger, open_session):
    with pytest.raises(InvalidSessionId):
        ledger.cast_vote(caller=VOTER_1, session_id=1, candidate_id=0)


class TestGuardOrder:
    """The reported error is the first violated precondition."""

    def test_voter_check_first(self, ledger, open_session):
        with pytest.raises(NotAuthorizedVoter):
            ledger.cast_vote(caller=OUTSIDER, session_id=99, candidate_id=99)

    def test_session_before_candidate(self, ledger, open_session):
        with pytest.raises(InvalidSessionId):
            ledger.cast_vote(caller=VOTER_1, session_id=99, candidate_id=99)

    def test_inactive_before_period(self, ledger, open_session, clock):
        ledger.end_session(caller=AUTHORITY, session_id=open_session)
        clock.advance(7200)
        with pytest.raises(SessionInactive):
            ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)

    def test_period_before_prior_vote(self, ledger, open_session, clock):
        ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)
        clock.advance(7200)
        with pytest.raises(VotingPeriodEnded):
            ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)

    def test_prior_vote_before_candidate(self, ledger, open_session):
        ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)
        with pytest.raises(AlreadyVoted):
            ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=99)


def test_votes_are_independent_per_session(ledger, open_session):
    second = ledger.create_session(caller=AUTHORITY, title="Second", duration=60)
    ledger.add_candidate(caller=AUTHORITY, session_id=second, name="Carol")

    ledger.cast_vote(caller=VOTER_1, session_id=open_session, candidate_id=0)
    ledger.cast_vote(caller=VOTER_1, session_id=second, candidate_id=0)

    assert ledger.get_results(open_session).total_votes == 1
    assert ledger.get_results(second).total_votes == 1


def test_tally_sum_holds_under_many_votes(ledger, open_session):
    voters = [f"0xbulk{n}" for n in range(12)]
    for n, voter in enumerate(voters):
        ledger.authorize_voter(caller=AUTHORITY, identity=voter)
        ledger.cast_vote(caller=voter, session_id=open_session, candidate_id=n % 2)
        assert_tally_consistent(open_session)

    results = ledger.get_results(open_session)
    assert results.vote_counts == [6, 6]
    assert results.total_votes == 12
