from __future__ import annotations
"""Domain error taxonomy.

Every error is a werkzeug HTTPException so the unified handler in
`create_app` renders it with the standard `{"error": {...}}` shape. Services
raise these directly; routes never translate them by hand.
"""
from werkzeug.exceptions import HTTPException


class DomainError(HTTPException):
    code = 500
    description = 'Unexpected error'

    def __init__(self, description: str | None = None):
        super().__init__(description=description or self.description)


class ValidationError(DomainError):
    code = 400
    description = 'Invalid input'


class PermissionDenied(DomainError):
    code = 403
    description = 'Missing permission'


class NotFoundError(DomainError):
    code = 404
    description = 'Not found'


class SuspendedAccountError(DomainError):
    code = 403
    description = 'Account suspended'


class ConflictError(DomainError):
    code = 409
    description = 'Conflict'


class UpstreamError(DomainError):
    code = 502
    description = 'Upstream service failed'


__all__ = [
    'DomainError', 'ValidationError', 'PermissionDenied', 'NotFoundError',
    'SuspendedAccountError', 'ConflictError', 'UpstreamError',
]
