"""Session repository - administrator and voter login sessions.

Sessions are temporary authentication tokens stored in cookies. Administrator
sessions live in ``sessions``; voter sessions live in ``voter_sessions`` and
are bound to one election.
"""
import secrets

from .base import Repository


class SessionRepository(Repository):
    """Repository for session management.

    Examples:
        >>> repo = SessionRepository(db)
        >>> session_id = repo.create(1, expires_hours=24)
        >>> session = repo.get_valid(session_id)
        >>> repo.delete(session_id)  # logout
    """

    # Administrator sessions

    def create(self, user_id: int, expires_hours: int = 24 * 7) -> str:
        """Create new session for an administrator.

        Args:
            user_id: User ID to create session for
            expires_hours: Session lifetime in hours (default: 7 days)

        Returns:
            Secure random session ID
        """
        session_id = secrets.token_urlsafe(32)

        self._execute(
            """INSERT INTO sessions (id, user_id, expires_at)
               VALUES (?, ?, datetime('now', '+' || ? || ' hours'))""",
            (session_id, user_id, expires_hours)
        )
        self._commit()
        return session_id

    def get_valid(self, session_id: str) -> dict | None:
        """Get administrator session if valid (not expired).

        Returns:
            Session dict with user info, or None if invalid/expired
        """
        return self._fetchone(
            """SELECT s.*, u.email, u.first_name, u.last_name
               FROM sessions s
               JOIN users u ON s.user_id = u.id
               WHERE s.id = ? AND s.expires_at > datetime('now')""",
            (session_id,)
        )

    def delete(self, session_id: str) -> bool:
        """Delete administrator session (logout).

        Returns:
            True if session existed and was deleted
        """
        cursor = self._execute("DELETE FROM sessions WHERE id = ?", (session_id,))
        self._commit()
        return cursor.rowcount > 0

    # Voter sessions

    def create_voter(self, voter_id: int, election_id: int, expires_hours: int = 24) -> str:
        """Create new session for a voter of one election.

        Args:
            voter_id: Voter row ID (voters.id)
            election_id: Election the session is valid for
            expires_hours: Session lifetime in hours

        Returns:
            Secure random session ID
        """
        session_id = secrets.token_urlsafe(32)

        self._execute(
            """INSERT INTO voter_sessions (id, voter_id, election_id, expires_at)
               VALUES (?, ?, ?, datetime('now', '+' || ? || ' hours'))""",
            (session_id, voter_id, election_id, expires_hours)
        )
        self._commit()
        return session_id

    def get_valid_voter(self, session_id: str) -> dict | None:
        """Get voter session if valid (not expired).

        Returns:
            Session dict with the voter's login handle, or None
        """
        return self._fetchone(
            """SELECT s.*, v.voter_id AS login
               FROM voter_sessions s
               JOIN voters v ON s.voter_id = v.id
               WHERE s.id = ? AND s.expires_at > datetime('now')""",
            (session_id,)
        )

    def delete_voter(self, session_id: str) -> bool:
        """Delete voter session (logout)."""
        cursor = self._execute("DELETE FROM voter_sessions WHERE id = ?", (session_id,))
        self._commit()
        return cursor.rowcount > 0

    def cleanup_expired(self) -> int:
        """Delete all expired sessions of both kinds.

        Returns:
            Number of sessions cleaned up
        """
        with self._transaction():
            admin = self._execute(
                "DELETE FROM sessions WHERE expires_at <= datetime('now')"
            ).rowcount
            voter = self._execute(
                "DELETE FROM voter_sessions WHERE expires_at <= datetime('now')"
            ).rowcount
        return admin + voter
