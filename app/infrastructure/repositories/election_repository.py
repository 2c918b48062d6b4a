"""Election repository - elections and their lifecycle state.

An election owns its questions (which own options), its voter roster, and
any votes cast. Only drafts can be deleted, and a draft has no votes yet.
"""
from .base import Repository

DRAFT = "draft"
LAUNCHED = "launched"
ENDED = "ended"

# Subquery guards for structural writes: true only while the election is a draft
DRAFT_ELECTION = "SELECT 1 FROM elections WHERE id = ? AND status = 'draft'"
DRAFT_QUESTION = (
    "SELECT 1 FROM questions q JOIN elections e ON e.id = q.election_id "
    "WHERE q.id = ? AND e.status = 'draft'"
)
DRAFT_OPTION = (
    "SELECT 1 FROM options o JOIN questions q ON q.id = o.question_id "
    "JOIN elections e ON e.id = q.election_id WHERE o.id = ? AND e.status = 'draft'"
)


class ElectionRepository(Repository):
    """Repository for election operations.

    Examples:
        >>> repo = ElectionRepository(db)
        >>> election_id = repo.create("Board 2024", user_id=1)
        >>> repo.launch(election_id)
        True
    """

    def create(self, name: str, user_id: int) -> int:
        """Create a draft election.

        Returns:
            New election ID
        """
        cursor = self._execute(
            "INSERT INTO elections (name, user_id) VALUES (?, ?)",
            (name, user_id)
        )
        self._commit()
        return cursor.lastrowid

    def get_by_id(self, election_id: int) -> dict | None:
        """Get election by ID."""
        return self._fetchone("SELECT * FROM elections WHERE id = ?", (election_id,))

    def list_by_user(self, user_id: int) -> list[dict]:
        """List elections owned by user, oldest first."""
        return self._fetchall(
            "SELECT * FROM elections WHERE user_id = ? ORDER BY id",
            (user_id,)
        )

    def update_name(self, election_id: int, name: str) -> bool:
        """Rename a draft election.

        Returns:
            True if a draft election was renamed
        """
        cursor = self._execute(
            "UPDATE elections SET name = ? WHERE id = ? AND status = ?",
            (name, election_id, DRAFT)
        )
        self._commit()
        return cursor.rowcount > 0

    def launch(self, election_id: int) -> bool:
        """Move a draft election to launched.

        The transition only happens when the election is still a draft, has
        at least one question, and every question has at least one option.

        Returns:
            True if the election was launched by this call
        """
        cursor = self._execute(
            """UPDATE elections
               SET status = ?, launched_at = CURRENT_TIMESTAMP
               WHERE id = ? AND status = ?
                 AND EXISTS (SELECT 1 FROM questions WHERE election_id = ?)
                 AND NOT EXISTS (
                     SELECT 1 FROM questions q
                     WHERE q.election_id = ?
                       AND NOT EXISTS (SELECT 1 FROM options o WHERE o.question_id = q.id)
                 )""",
            (LAUNCHED, election_id, DRAFT, election_id, election_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def end(self, election_id: int) -> bool:
        """Move a launched election to ended.

        Returns:
            True if the election was ended by this call
        """
        cursor = self._execute(
            """UPDATE elections
               SET status = ?, ended_at = CURRENT_TIMESTAMP
               WHERE id = ? AND status = ?""",
            (ENDED, election_id, LAUNCHED)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, election_id: int) -> bool:
        """Delete a draft election with every record it owns, in one transaction.

        Every statement is conditional on the election still being a draft,
        so a concurrently launched election is left untouched.

        Returns:
            True if a draft election existed and was deleted
        """
        guard = f"AND EXISTS ({DRAFT_ELECTION})"
        with self._transaction():
            self._execute(
                f"""DELETE FROM voter_sessions WHERE election_id = ? {guard}""",
                (election_id, election_id)
            )
            self._execute(
                f"""DELETE FROM voters WHERE election_id = ? {guard}""",
                (election_id, election_id)
            )
            self._execute(
                f"""DELETE FROM options
                    WHERE question_id IN (SELECT id FROM questions WHERE election_id = ?)
                    {guard}""",
                (election_id, election_id)
            )
            self._execute(
                f"""DELETE FROM questions WHERE election_id = ? {guard}""",
                (election_id, election_id)
            )
            cursor = self._execute(
                "DELETE FROM elections WHERE id = ? AND status = ?",
                (election_id, DRAFT)
            )
        return cursor.rowcount > 0
