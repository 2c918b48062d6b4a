"""Application services - business logic layer."""

from .auth_service import AuthService
from .election_service import ElectionService
from .ballot_service import BallotService

__all__ = [
    "AuthService",
    "ElectionService",
    "BallotService",
]
