"""Authentication service - administrator and voter sign-in and sessions."""
import logging
import sqlite3
from typing import Optional

from ...config import PASSWORD_MIN_LENGTH, SESSION_HOURS
from ...infrastructure.repositories import (
    UserRepository, SessionRepository, VoterRepository, ElectionRepository, is_unique_violation
)
from ...infrastructure.repositories.election_repository import LAUNCHED
from ..errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations.

    Responsibilities:
    - Administrator sign-up and sign-in
    - Voter sign-in against one election's roster
    - Session management for both identity kinds
    """

    def __init__(
        self,
        user_repository: UserRepository,
        session_repository: SessionRepository,
        voter_repository: VoterRepository,
        election_repository: ElectionRepository
    ):
        self.user_repo = user_repository
        self.session_repo = session_repository
        self.voter_repo = voter_repository
        self.election_repo = election_repository

    # ========================================================================
    # Administrators
    # ========================================================================

    def register(self, email: str, password: str, first_name: str, last_name: str = "") -> dict:
        """Create administrator account.

        Raises:
            InvalidInputError: missing email/name or short password
            ConflictError: email already registered
        """
        email = (email or "").strip().lower()
        first_name = (first_name or "").strip()

        if not email or "@" not in email:
            raise InvalidInputError("A valid email is required")
        if not first_name:
            raise InvalidInputError("First name is required")
        if len(password or "") < PASSWORD_MIN_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
            )

        try:
            user_id = self.user_repo.create(email, password, first_name, last_name or "")
        except sqlite3.IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise ConflictError("An account with this email already exists")

        logger.info("Administrator %s registered", user_id)
        return self.user_repo.get_by_id(user_id)

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """Authenticate administrator with email and password.

        Returns:
            User dict if authenticated, None otherwise
        """
        user = self.user_repo.authenticate(email, password)
        if not user:
            logger.warning("Rejected administrator sign-in")
        return user

    def create_session(self, user_id: int, expires_hours: int = SESSION_HOURS) -> str:
        return self.session_repo.create(user_id, expires_hours)

    def delete_session(self, session_id: str) -> bool:
        return self.session_repo.delete(session_id)

    # ========================================================================
    # Voters
    # ========================================================================

    def authenticate_voter(self, election_id: int, voter_id: str, password: str) -> Optional[dict]:
        """Verify voter credentials for one launched election.

        Args:
            election_id: Election the voter wants to vote in
            voter_id: Login handle on that election's roster
            password: Voter password

        Returns:
            Voter dict if the credentials match this election's roster, None otherwise

        Raises:
            NotFoundError: election does not exist
            ForbiddenError: election is not open for voting
        """
        election = self.election_repo.get_by_id(election_id)
        if not election:
            raise NotFoundError("Election not found")
        if election["status"] != LAUNCHED:
            raise ForbiddenError("Election is not open for voting")

        voter = self.voter_repo.authenticate(election_id, voter_id or "", password or "")
        if not voter:
            logger.warning("Rejected voter sign-in for election %s", election_id)
        return voter

    def create_voter_session(self, voter: dict) -> str:
        return self.session_repo.create_voter(voter["id"], voter["election_id"])

    def delete_voter_session(self, session_id: str) -> bool:
        return self.session_repo.delete_voter(session_id)
