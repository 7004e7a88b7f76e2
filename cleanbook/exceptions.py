"""
Domain errors raised by the booking and invoicing services.

Each error is an HTTPException carrying a stable machine-readable ``kind`` so
the API layer can render ``{"error": kind, "detail": message}`` without
inspecting messages.
"""

from fastapi import HTTPException


class BookingEngineError(HTTPException):
    """Base class for domain failures surfaced to callers"""

    kind = "internal"
    http_status = 500

    def __init__(self, detail: str):
        super().__init__(status_code=self.http_status, detail=detail)

    @property
    def message(self) -> str:
        return str(self.detail)


class NotFoundError(BookingEngineError):
    kind = "not_found"
    http_status = 404


class ConflictError(BookingEngineError):
    kind = "conflict"
    http_status = 409


class InvalidRequestError(BookingEngineError):
    kind = "validation"
    http_status = 400


class ForbiddenError(BookingEngineError):
    kind = "forbidden"
    http_status = 403


class UnauthorizedError(BookingEngineError):
    kind = "unauthorized"
    http_status = 401
