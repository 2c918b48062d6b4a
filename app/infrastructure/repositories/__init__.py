# Repository Pattern Implementation
"""
Repositories abstract database operations.
Each entity has its own repository.

Usage:
    from app.infrastructure.repositories import ElectionRepository

    repo = ElectionRepository(db)
    election = repo.get_by_id(election_id)
"""
from .base import Repository, ConnectionProtocol, is_unique_violation
from .user_repository import UserRepository
from .session_repository import SessionRepository
from .election_repository import ElectionRepository
from .question_repository import QuestionRepository, OptionRepository
from .voter_repository import VoterRepository
from .vote_repository import VoteRepository

__all__ = [
    "Repository",
    "ConnectionProtocol",
    "is_unique_violation",
    "UserRepository",
    "SessionRepository",
    "ElectionRepository",
    "QuestionRepository",
    "OptionRepository",
    "VoterRepository",
    "VoteRepository",
]
