"""Question and option repositories.

Questions belong to an election and options belong to a question. Both are
kept in insertion order through a ``position`` column.

Writes only take effect while the owning election is a draft; they report
``None``/``False`` otherwise.
"""
from .base import Repository
from .election_repository import DRAFT_ELECTION, DRAFT_QUESTION, DRAFT_OPTION


class QuestionRepository(Repository):
    """Repository for ballot questions."""

    def create(self, election_id: int, title: str, description: str = "") -> int | None:
        """Append a question to a draft election.

        Returns:
            New question ID, or None if the election is not a draft
        """
        cursor = self._execute(
            f"""INSERT INTO questions (election_id, title, description, position)
                SELECT ?, ?, ?, (SELECT COALESCE(MAX(position), 0) + 1
                                 FROM questions WHERE election_id = ?)
                WHERE EXISTS ({DRAFT_ELECTION})""",
            (election_id, title, description, election_id, election_id)
        )
        self._commit()
        return cursor.lastrowid if cursor.rowcount > 0 else None

    def get_by_id(self, question_id: int) -> dict | None:
        return self._fetchone("SELECT * FROM questions WHERE id = ?", (question_id,))

    def list_by_election(self, election_id: int) -> list[dict]:
        return self._fetchall(
            "SELECT * FROM questions WHERE election_id = ? ORDER BY position, id",
            (election_id,)
        )

    def update(self, question_id: int, title: str, description: str | None = None) -> bool:
        """Update question title and, when given, description."""
        if description is None:
            cursor = self._execute(
                f"UPDATE questions SET title = ? WHERE id = ? AND EXISTS ({DRAFT_QUESTION})",
                (title, question_id, question_id)
            )
        else:
            cursor = self._execute(
                f"""UPDATE questions SET title = ?, description = ?
                    WHERE id = ? AND EXISTS ({DRAFT_QUESTION})""",
                (title, description, question_id, question_id)
            )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, question_id: int) -> bool:
        """Delete question and its options."""
        with self._transaction():
            self._execute(
                f"DELETE FROM options WHERE question_id = ? AND EXISTS ({DRAFT_QUESTION})",
                (question_id, question_id)
            )
            cursor = self._execute(
                f"DELETE FROM questions WHERE id = ? AND EXISTS ({DRAFT_QUESTION})",
                (question_id, question_id)
            )
        return cursor.rowcount > 0


class OptionRepository(Repository):
    """Repository for the selectable options of a question."""

    def create(self, question_id: int, title: str) -> int | None:
        """Append an option to a question of a draft election.

        Returns:
            New option ID, or None if the election is not a draft
        """
        cursor = self._execute(
            f"""INSERT INTO options (question_id, title, position)
                SELECT ?, ?, (SELECT COALESCE(MAX(position), 0) + 1
                              FROM options WHERE question_id = ?)
                WHERE EXISTS ({DRAFT_QUESTION})""",
            (question_id, title, question_id, question_id)
        )
        self._commit()
        return cursor.lastrowid if cursor.rowcount > 0 else None

    def get_by_id(self, option_id: int) -> dict | None:
        return self._fetchone("SELECT * FROM options WHERE id = ?", (option_id,))

    def list_by_question(self, question_id: int) -> list[dict]:
        return self._fetchall(
            "SELECT * FROM options WHERE question_id = ? ORDER BY position, id",
            (question_id,)
        )

    def list_by_election(self, election_id: int) -> list[dict]:
        """All options of every question in the election."""
        return self._fetchall(
            """SELECT o.* FROM options o
               JOIN questions q ON o.question_id = q.id
               WHERE q.election_id = ?
               ORDER BY q.position, q.id, o.position, o.id""",
            (election_id,)
        )

    def update(self, option_id: int, title: str) -> bool:
        cursor = self._execute(
            f"""UPDATE options SET title = ?
                WHERE id = ? AND EXISTS ({DRAFT_OPTION})""",
            (title, option_id, option_id)
        )
        self._commit()
        return cursor.rowcount > 0

    def delete(self, option_id: int) -> bool:
        cursor = self._execute(
            f"""DELETE FROM options
                WHERE id = ? AND EXISTS ({DRAFT_OPTION})""",
            (option_id, option_id)
        )
        self._commit()
        return cursor.rowcount > 0
