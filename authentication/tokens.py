"""
Identity token utilities.

Callers prove their identity with a signed JWT whose `sub` claim is the
identity. This module provides functions for:
- Downloading a JWKS (JSON Web Key Set) when tokens are RS256-signed
- Selecting the verification key for a token
- Verifying tokens and extracting the caller identity
- Minting HS256 tokens for development and tests
"""

import datetime
import logging

import jwt
import requests
from django.conf import settings
from django.core.cache import cache

from .identity import is_null_identity, normalize_identity

logger = logging.getLogger(__name__)

JWKS_CACHE_KEY = "ledger_jwks"


def get_jwks():
    """
    Download the JWKS from LEDGER_JWKS_URL.
    Result is cached for LEDGER_JWKS_CACHE_SECONDS.

    Returns:
        dict: JWKS containing public keys

    Raises:
        requests.RequestException: If JWKS download fails
    """
    cached_jwks = cache.get(JWKS_CACHE_KEY)
    if cached_jwks:
        logger.debug("JWKS retrieved from cache")
        return cached_jwks

    jwks_uri = settings.LEDGER_JWKS_URL
    logger.info(f"Downloading JWKS from: {jwks_uri}")

    try:
        response = requests.get(jwks_uri, timeout=10)
        response.raise_for_status()
        jwks = response.json()
    except requests.RequestException as e:
        logger.error(f"Failed to download JWKS: {e}")
        raise

    cache.set(JWKS_CACHE_KEY, jwks, settings.LEDGER_JWKS_CACHE_SECONDS)
    logger.info("JWKS downloaded and cached successfully")
    return jwks


def get_signing_key(token):
    """
    Pick the key that verifies `token`.

    With LEDGER_JWKS_URL set, the key is looked up in the JWKS by the
    token's 'kid' header; otherwise the shared LEDGER_TOKEN_SECRET is used.

    Raises:
        jwt.InvalidTokenError: If no matching key exists
    """
    if not settings.LEDGER_JWKS_URL:
        return settings.LEDGER_TOKEN_SECRET

    kid = jwt.get_unverified_header(token).get('kid')
    if not kid:
        raise jwt.InvalidTokenError("Token header does not contain 'kid'")

    for key in get_jwks().get('keys', []):
        if key.get('kid') == kid:
            try:
                signing_key = jwt.PyJWK(key)
            except (jwt.PyJWKError, jwt.InvalidKeyError) as e:
                logger.error(f"Unusable JWKS entry for kid '{kid}': {e}")
                raise jwt.InvalidTokenError(f"Signing key with kid '{kid}' is not usable") from e
            logger.debug(f"Found signing key with kid: {kid}")
            return signing_key.key

    raise jwt.InvalidTokenError(f"Signing key with kid '{kid}' not found in JWKS")


def decode_identity_token(token):
    """
    Verify a token and return the caller identity and its claims.

    Args:
        token (str): Encoded JWT

    Returns:
        tuple: (identity, claims)

    Raises:
        jwt.InvalidTokenError: If the signature, expiry, audience or issuer
            check fails, or the token carries no usable subject
    """
    options = {
        'require': ['sub'],
        'verify_aud': bool(settings.LEDGER_TOKEN_AUDIENCE),
        'verify_iss': bool(settings.LEDGER_TOKEN_ISSUER),
    }
    claims = jwt.decode(
        token,
        get_signing_key(token),
        algorithms=settings.LEDGER_TOKEN_ALGORITHMS,
        audience=settings.LEDGER_TOKEN_AUDIENCE or None,
        issuer=settings.LEDGER_TOKEN_ISSUER or None,
        options=options,
    )

    identity = claims['sub']
    if is_null_identity(identity):
        raise jwt.InvalidTokenError("Token subject is not a valid identity")

    return normalize_identity(identity), claims


def issue_identity_token(identity, expires_in=3600, **claims):
    """
    Mint an HS256 token for `identity` signed with LEDGER_TOKEN_SECRET.

    Example:
        >>> token = issue_identity_token("0xabc")
        >>> decode_identity_token(token)[0]
        '0xabc'
    """
    now = datetime.datetime.now(tz=datetime.timezone.utc)
    payload = {
        'sub': normalize_identity(identity),
        'iat': now,
        'exp': now + datetime.timedelta(seconds=expires_in),
    }
    if settings.LEDGER_TOKEN_AUDIENCE:
        payload['aud'] = settings.LEDGER_TOKEN_AUDIENCE
    if settings.LEDGER_TOKEN_ISSUER:
        payload['iss'] = settings.LEDGER_TOKEN_ISSUER
    payload.update(claims)
    return jwt.encode(payload, settings.LEDGER_TOKEN_SECRET, algorithm='HS256')
