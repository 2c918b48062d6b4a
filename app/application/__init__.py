"""Application layer - business logic services.

This layer contains application services that orchestrate domain operations.
Services are independent of routing and can be tested in isolation.
"""

from .context import AccessContext, ANONYMOUS
from .services.auth_service import AuthService
from .services.election_service import ElectionService
from .services.ballot_service import BallotService

__all__ = [
    "AccessContext",
    "ANONYMOUS",
    "AuthService",
    "ElectionService",
    "BallotService",
]
