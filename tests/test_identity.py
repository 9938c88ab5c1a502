import pytest

from authentication.identity import LedgerIdentity, is_null_identity, normalize_identity


def test_normalize_strips_and_lowercases():
    assert normalize_identity("  0xAbCd ") == '0xabcd'
    assert normalize_identity(None) == ''


@pytest.mark.parametrize('identity', ['', '   ', None, '0x', '0', '0x0000000000000000000000000000000000000000'])
def test_null_identities(identity):
    assert is_null_identity(identity)


@pytest.mark.parametrize('identity', ['0x01', 'alice', '0x00a0'])
def test_non_null_identities(identity):
    assert not is_null_identity(identity)


def test_ledger_identity_is_normalized_and_authenticated():
    user = LedgerIdentity(' 0xABC ')
    assert user.identity == '0xabc'
    assert user.is_authenticated
    assert user == LedgerIdentity('0xabc')
