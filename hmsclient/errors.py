from __future__ import annotations

from typing import Any, Optional

VALIDATION = 'validation'
NOT_FOUND = 'not_found'
UNAUTHORIZED = 'unauthorized'
CONFLICT = 'conflict'
UNKNOWN = 'unknown'

KINDS = (VALIDATION, NOT_FOUND, UNAUTHORIZED, CONFLICT, UNKNOWN)

_STATUS_KINDS = {
    400: VALIDATION,
    401: UNAUTHORIZED,
    403: UNAUTHORIZED,
    404: NOT_FOUND,
    409: CONFLICT,
}


def kind_for_status(status: Optional[int]) -> str:
    return _STATUS_KINDS.get(status, UNKNOWN)


def _flatten(detail: Any) -> str:
    if isinstance(detail, dict):
        parts = []
        for field, msgs in detail.items():
            text = _flatten(msgs)
            parts.append(text if field in ('detail', 'non_field_errors') else f'{field}: {text}')
        return '; '.join(parts)
    if isinstance(detail, (list, tuple)):
        return ' '.join(_flatten(d) for d in detail)
    return '' if detail is None else str(detail)


class ApiError(Exception):
    """Failure of an API call.

    ``kind`` is one of :data:`KINDS`; ``details`` keeps the per-field
    messages of a validation error when the server sent them.
    """

    def __init__(self, kind: str, message: str, status: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.kind = kind if kind in KINDS else UNKNOWN
        self.message = message
        self.status = status
        self.details = details

    @classmethod
    def from_body(cls, status: int, body: Any) -> 'ApiError':
        err = body.get('error') if isinstance(body, dict) else None
        if isinstance(err, dict):
            detail = err.get('message')
            kind = err.get('code') or kind_for_status(status)
        else:
            detail = body
            kind = kind_for_status(status)
        message = _flatten(detail) or f'HTTP {status}'
        return cls(kind, message, status=status, details=detail if isinstance(detail, dict) else None)

    def __repr__(self) -> str:
        return f'ApiError({self.kind!r}, {self.message!r}, status={self.status})'
