"""
DRF authentication backed by signed identity tokens.
"""
import logging

import jwt
import requests
from rest_framework import authentication, exceptions

from .identity import LedgerIdentity
from .tokens import decode_identity_token

logger = logging.getLogger(__name__)


class LedgerTokenAuthentication(authentication.BaseAuthentication):
    """
    Authenticate `Authorization: Bearer <jwt>` requests.

    Requests without the header stay anonymous; a present but invalid token
    is rejected with 401.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid bearer header.')

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid bearer token encoding.')

        try:
            identity, claims = decode_identity_token(token)
        except jwt.ExpiredSignatureError:
            logger.warning("Rejected expired identity token")
            raise exceptions.AuthenticationFailed('Token has expired.')
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected identity token: {e}")
            raise exceptions.AuthenticationFailed('Invalid token.')
        except requests.RequestException:
            raise exceptions.AuthenticationFailed('Unable to verify token at this time.')

        return LedgerIdentity(identity, claims), token

    def authenticate_header(self, request):
        return self.keyword
