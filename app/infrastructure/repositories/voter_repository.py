"""Voter repository - per-election voter roster and credentials."""
from .base import Repository
from .election_repository import DRAFT_ELECTION


class VoterRepository(Repository):
    """Repository for voters.

    A voter's login handle (``voter_id``) is unique within its election only.
    Listings never include the password hash. The roster only changes while
    the election is a draft.
    """

    _PUBLIC_COLUMNS = "id, election_id, voter_id, created_at"

    def create(self, election_id: int, voter_id: str, password: str) -> int | None:
        """Add voter to the roster of a draft election.

        Returns:
            New voter row ID, or None if the election is not a draft

        Raises:
            sqlite3.IntegrityError: if the handle is already on the roster
        """
        cursor = self._execute(
            f"""INSERT INTO voters (election_id, voter_id, password_hash)
                SELECT ?, ?, ? WHERE EXISTS ({DRAFT_ELECTION})""",
            (election_id, voter_id, self._hash_password(password), election_id)
        )
        self._commit()
        return cursor.lastrowid if cursor.rowcount > 0 else None

    def get_by_id(self, voter_pk: int) -> dict | None:
        return self._fetchone(
            f"SELECT {self._PUBLIC_COLUMNS} FROM voters WHERE id = ?",
            (voter_pk,)
        )

    def list_by_election(self, election_id: int) -> list[dict]:
        return self._fetchall(
            f"SELECT {self._PUBLIC_COLUMNS} FROM voters WHERE election_id = ? ORDER BY id",
            (election_id,)
        )

    def delete(self, voter_pk: int) -> bool:
        """Remove voter of a draft election and any sessions they hold."""
        with self._transaction():
            self._execute(
                """DELETE FROM voter_sessions
                   WHERE voter_id = ? AND EXISTS (
                       SELECT 1 FROM elections e
                       WHERE e.id = voter_sessions.election_id AND e.status = 'draft')""",
                (voter_pk,)
            )
            cursor = self._execute(
                """DELETE FROM voters
                   WHERE id = ? AND EXISTS (
                       SELECT 1 FROM elections e
                       WHERE e.id = voters.election_id AND e.status = 'draft')""",
                (voter_pk,)
            )
        return cursor.rowcount > 0

    def authenticate(self, election_id: int, voter_id: str, password: str) -> dict | None:
        """Verify a voter's credentials against one election's roster.

        Returns:
            Voter dict (without credentials) if valid, None otherwise
        """
        row = self._fetchone(
            "SELECT * FROM voters WHERE election_id = ? AND voter_id = ?",
            (election_id, voter_id.strip())
        )
        if not row or not self._verify_password(password, row["password_hash"]):
            return None
        row.pop("password_hash")
        return row
