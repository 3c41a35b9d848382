# backend/itamdb/errors.py
"""
Typed service errors.

Services raise these directly; because they are HTTPExceptions, FastAPI maps
them to the right status code without extra exception handlers.
"""

from __future__ import annotations

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail)


class InvalidInput(ServiceError):
    """Malformed request values; nothing was written."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(ServiceError):
    """The request is well formed but would break a stock invariant."""

    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class TransientFailure(ServiceError):
    """Lock timeout, deadlock or lost connection. Safe to retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class InternalFailure(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
