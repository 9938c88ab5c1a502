"""
Caller identities.

An identity is an opaque string (typically an account address or a
subject claim from a signed token). Identities are compared after
normalization so that "0xAbC" and " 0xabc " refer to the same caller.
"""

import re

MAX_IDENTITY_LENGTH = 255
NULL_IDENTITY_PATTERN = re.compile(r'^(0x)?0*$')


def normalize_identity(identity):
    """
    Normalize an identity for storage and comparison.

    Args:
        identity (str): Raw identity as received from a token or request

    Returns:
        str: Stripped, lower-cased identity ('' for None)

    Example:
        >>> normalize_identity(" 0xAbC ")
        '0xabc'
    """
    if identity is None:
        return ''
    return str(identity).strip().lower()


def is_null_identity(identity):
    """
    True for the empty identity and for all-zero addresses such as 0x0000...
    """
    return bool(NULL_IDENTITY_PATTERN.match(normalize_identity(identity)))


class LedgerIdentity:
    """
    Authenticated caller, set as request.user by LedgerTokenAuthentication.
    """
    is_authenticated = True
    is_anonymous = False

    def __init__(self, identity, claims=None):
        self.identity = normalize_identity(identity)
        self.claims = claims or {}

    def __str__(self):
        return self.identity

    def __repr__(self):
        return f"LedgerIdentity({self.identity!r})"

    def __eq__(self, other):
        return isinstance(other, LedgerIdentity) and other.identity == self.identity

    def __hash__(self):
        return hash(self.identity)
