"""
Bearer token authentication for the REST API.

Requests carry ``Authorization: Bearer <access token>`` issued by the
login endpoint.  Keeping the class here gives settings a stable import
path and keeps view modules free of authentication imports.
"""
from __future__ import annotations

from rest_framework.authentication import BaseAuthentication
from rest_framework_simplejwt.authentication import JWTAuthentication


class BearerAuthentication(JWTAuthentication):
    """JWT access-token authentication.

    The realm is reported in the ``WWW-Authenticate`` header, which makes
    DRF answer unauthenticated requests with 401 rather than 403 so that
    clients know to discard their credential.
    """

    www_authenticate_realm = 'clinic'


class AnonymousEndpointAuthentication(BaseAuthentication):
    """For sign-in style endpoints: ignores any credential sent.

    It still names the Bearer scheme so that a rejected refresh token
    is answered with 401 like every other credential failure.
    """

    def authenticate(self, request):
        return None

    def authenticate_header(self, request):
        return f'Bearer realm="{BearerAuthentication.www_authenticate_realm}"'
