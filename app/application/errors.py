"""Errors raised by application services.

Each error is an ``HTTPException`` carrying the status code of its kind, so
routes let them propagate and FastAPI answers with the right status.
"""
from fastapi import HTTPException


class VotingError(HTTPException):
    """Base class for election and ballot errors."""

    status_code = 400
    code = "error"
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class NotFoundError(VotingError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class ForbiddenError(VotingError):
    status_code = 403
    code = "forbidden"
    default_detail = "Access denied"


class UnauthorizedError(VotingError):
    status_code = 401
    code = "unauthorized"
    default_detail = "Not authenticated"


class InvalidInputError(VotingError):
    status_code = 400
    code = "invalid_input"
    default_detail = "Invalid input"


class ConflictError(VotingError):
    status_code = 409
    code = "conflict"
    default_detail = "Already exists"


class InvalidStateError(VotingError):
    """Operation not allowed in the election's current lifecycle state."""

    status_code = 423
    code = "invalid_state"
    default_detail = "Election is not in a state that allows this"
