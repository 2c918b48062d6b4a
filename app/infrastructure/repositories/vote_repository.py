"""Vote repository - immutable ballot records.

Votes are immutable: there is no update or delete.
"""
from .base import Repository


class VoteRepository(Repository):
    """Repository for cast votes.

    Examples:
        >>> repo = VoteRepository(db)
        >>> vote_id = repo.create(election_id=1, voter_id=3, answers={10: 21, 11: 25})
        >>> repo.exists(1, 3)
        True
    """

    def create(self, election_id: int, voter_id: int, answers: dict[int, int]) -> int:
        """Record a vote and all its answers in one transaction.

        Args:
            election_id: Election ID
            voter_id: Voter row ID (voters.id)
            answers: Mapping of question ID to chosen option ID

        Returns:
            New vote ID

        Raises:
            sqlite3.IntegrityError: if the voter already has a vote in this election
        """
        with self._transaction():
            cursor = self._execute(
                "INSERT INTO votes (election_id, voter_id) VALUES (?, ?)",
                (election_id, voter_id)
            )
            vote_id = cursor.lastrowid
            self._execute_many(
                "INSERT INTO vote_answers (vote_id, question_id, option_id) VALUES (?, ?, ?)",
                [(vote_id, question_id, option_id) for question_id, option_id in answers.items()]
            )
        return vote_id

    def exists(self, election_id: int, voter_id: int) -> bool:
        row = self._execute(
            "SELECT 1 FROM votes WHERE election_id = ? AND voter_id = ?",
            (election_id, voter_id)
        ).fetchone()
        return row is not None

