"""Python client for the clinic administration API.

``api`` wraps the REST endpoints and never raises, ``stores`` keep an
in-memory mirror of one collection each, ``forms`` and ``listing``
hold the presentation rules and ``session`` tracks the signed-in user.
"""
from .api import ApiClient, ApiResponse
from .errors import ApiError
from .registry import StoreRegistry
from .session import AuthResult, Identity, Session

__all__ = ['ApiClient', 'ApiResponse', 'ApiError', 'StoreRegistry', 'Session', 'AuthResult', 'Identity']
