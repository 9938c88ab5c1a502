import json

import jwt
import pytest
import requests
from cryptography.hazmat.primitives.asymmetric import rsa
from django.core.cache import cache
from rest_framework.test import APIRequestFactory
from rest_framework import exceptions

from authentication import tokens
from authentication.backends import LedgerTokenAuthentication
from authentication.tokens import decode_identity_token, issue_identity_token

JWKS_URL = 'https://idp.example.org/.well-known/jwks.json'


class FakeResponse:

    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


@pytest.fixture
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def jwks_settings(settings, rsa_key, monkeypatch):
    settings.LEDGER_JWKS_URL = JWKS_URL
    settings.LEDGER_TOKEN_ALGORITHMS = ['RS256']
    cache.clear()

    jwk = json.loads(jwt.algorithms.RSAAlgorithm.to_jwk(rsa_key.public_key()))
    jwk['kid'] = 'ledger-key-1'
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return FakeResponse({'keys': [jwk]})

    monkeypatch.setattr(tokens.requests, 'get', fake_get)
    yield calls
    cache.clear()


def test_issue_and_decode_round_trip():
    identity, claims = decode_identity_token(issue_identity_token('0xABC'))
    assert identity == '0xabc'
    assert claims['sub'] == '0xabc'


def test_expired_token_is_rejected():
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_identity_token(issue_identity_token('0xabc', expires_in=-60))


def test_wrong_secret_is_rejected(settings):
    token = jwt.encode({'sub': '0xabc'}, 'x' * 40, algorithm='HS256')
    with pytest.raises(jwt.InvalidSignatureError):
        decode_identity_token(token)


def test_token_without_subject_is_rejected(settings):
    token = jwt.encode({'name': 'nobody'}, settings.LEDGER_TOKEN_SECRET, algorithm='HS256')
    with pytest.raises(jwt.MissingRequiredClaimError):
        decode_identity_token(token)


def test_null_subject_is_rejected(settings):
    token = jwt.encode({'sub': '0x0000'}, settings.LEDGER_TOKEN_SECRET, algorithm='HS256')
    with pytest.raises(jwt.InvalidTokenError):
        decode_identity_token(token)


def test_audience_and_issuer_enforced_when_configured(settings):
    settings.LEDGER_TOKEN_AUDIENCE = 'voting-ledger'
    settings.LEDGER_TOKEN_ISSUER = 'https://idp.example.org'

    identity, _ = decode_identity_token(issue_identity_token('0xabc'))
    assert identity == '0xabc'

    foreign = issue_identity_token('0xabc', aud='another-service')
    with pytest.raises(jwt.InvalidAudienceError):
        decode_identity_token(foreign)


def test_rs256_token_verified_against_jwks(jwks_settings, rsa_key):
    token = jwt.encode({'sub': '0xRSA'}, rsa_key, algorithm='RS256', headers={'kid': 'ledger-key-1'})

    assert decode_identity_token(token)[0] == '0xrsa'
    assert decode_identity_token(token)[0] == '0xrsa'
    # second verification served from cache
    assert jwks_settings == [JWKS_URL]


def test_rs256_token_with_unknown_kid(jwks_settings, rsa_key):
    token = jwt.encode({'sub': '0xrsa'}, rsa_key, algorithm='RS256', headers={'kid': 'rotated-away'})
    with pytest.raises(jwt.InvalidTokenError):
        decode_identity_token(token)


def test_rs256_token_without_kid(jwks_settings, rsa_key):
    token = jwt.encode({'sub': '0xrsa'}, rsa_key, algorithm='RS256')
    with pytest.raises(jwt.InvalidTokenError):
        decode_identity_token(token)


@pytest.fixture
def unusable_jwks(settings, monkeypatch):
    settings.LEDGER_JWKS_URL = JWKS_URL
    settings.LEDGER_TOKEN_ALGORITHMS = ['RS256']
    cache.clear()

    def fake_get(url, timeout):
        return FakeResponse({'keys': [{'kid': 'ledger-key-1', 'kty': 'bogus'}]})

    monkeypatch.setattr(tokens.requests, 'get', fake_get)
    yield
    cache.clear()


def test_rs256_token_with_unusable_jwks_entry(unusable_jwks, rsa_key):
    token = jwt.encode({'sub': '0xrsa'}, rsa_key, algorithm='RS256', headers={'kid': 'ledger-key-1'})
    with pytest.raises(jwt.InvalidTokenError):
        decode_identity_token(token)


class TestLedgerTokenAuthentication:

    def authenticate(self, header=None):
        factory = APIRequestFactory()
        extra = {'HTTP_AUTHORIZATION': header} if header is not None else {}
        request = factory.get('/api/auth/whoami/', **extra)
        return LedgerTokenAuthentication().authenticate(request)

    def test_no_header_is_anonymous(self):
        assert self.authenticate() is None

    def test_other_scheme_is_ignored(self):
        assert self.authenticate('Basic dXNlcjpwYXNz') is None

    def test_valid_token(self):
        token = issue_identity_token('0xVoter')
        user, auth = self.authenticate(f'Bearer {token}')
        assert user.identity == '0xvoter'
        assert auth == token

    def test_invalid_token(self):
        with pytest.raises(exceptions.AuthenticationFailed):
            self.authenticate('Bearer not-a-jwt')

    def test_malformed_header(self):
        with pytest.raises(exceptions.AuthenticationFailed):
            self.authenticate('Bearer')

    def test_expired_token(self):
        token = issue_identity_token('0xvoter', expires_in=-60)
        with pytest.raises(exceptions.AuthenticationFailed):
            self.authenticate(f'Bearer {token}')

    def test_unusable_signing_key(self, unusable_jwks, rsa_key):
        token = jwt.encode({'sub': '0xrsa'}, rsa_key, algorithm='RS256', headers={'kid': 'ledger-key-1'})
        with pytest.raises(exceptions.AuthenticationFailed):
            self.authenticate(f'Bearer {token}')
