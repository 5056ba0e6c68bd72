import logging

from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)

# Error kinds shared with the API client
VALIDATION = 'validation'
NOT_FOUND = 'not_found'
UNAUTHORIZED = 'unauthorized'
CONFLICT = 'conflict'
UNKNOWN = 'unknown'


class Conflict(exceptions.APIException):
    """The request clashes with the current state of the resource."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Request conflicts with the current state of the resource.'
    default_code = CONFLICT


def _error_kind(exc, status_code: int) -> str:
    if isinstance(exc, exceptions.ValidationError):
        return VALIDATION
    if isinstance(exc, (exceptions.NotFound, Http404)):
        return NOT_FOUND
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed, exceptions.PermissionDenied)):
        return UNAUTHORIZED
    if status_code == status.HTTP_409_CONFLICT:
        return CONFLICT
    if status_code == status.HTTP_400_BAD_REQUEST:
        return VALIDATION
    return UNKNOWN


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view').__class__.__name__, exc_info=exc)
        return Response({'ok': False, 'error': {'code': UNKNOWN, 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict) and set(resp.data) <= {'detail', 'code', 'messages'}:
        detail = resp.data.get('detail')
    else:
        detail = resp.data
    return Response(
        {'ok': False, 'error': {'code': _error_kind(exc, resp.status_code), 'message': detail}},
        status=resp.status_code,
        headers={k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if resp.has_header(k)},
    )
