import datetime

import pytest
from rest_framework.test import APIClient

from authentication.tokens import issue_identity_token
from voting.services import VotingLedger
from voting.views import LedgerViewMixin

AUTHORITY = '0xauthority'
VOTER_1 = '0xvoter1'
VOTER_2 = '0xvoter2'
OUTSIDER = '0xoutsider'

START = datetime.datetime(2026, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
    """Clock returning a fixed time until advanced."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += datetime.timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest.fixture
def ledger(db, clock):
    VotingLedger.initialize(AUTHORITY, now=START)
    return VotingLedger(clock=clock)


@pytest.fixture
def open_session(ledger):
    """Session 0 with candidates Alice (0) and Bob (1), voters 1 and 2 authorized."""
    session_id = ledger.create_session(caller=AUTHORITY, title="Board Election", duration=3600)
    ledger.add_candidate(caller=AUTHORITY, session_id=session_id, name="Alice")
    ledger.add_candidate(caller=AUTHORITY, session_id=session_id, name="Bob")
    ledger.authorize_voter(caller=AUTHORITY, identity=VOTER_1)
    ledger.authorize_voter(caller=AUTHORITY, identity=VOTER_2)
    return session_id


@pytest.fixture
def api_ledger(ledger, monkeypatch):
    """Make the REST views use the ledger driven by the fake clock."""
    monkeypatch.setattr(LedgerViewMixin, 'get_ledger', lambda self: ledger)
    return ledger


@pytest.fixture
def client_for():
    def make(identity=None):
        client = APIClient()
        if identity is not None:
            client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_identity_token(identity)}")
        return client
    return make
