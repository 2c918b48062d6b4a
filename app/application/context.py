"""Caller identity passed into every service call."""
from dataclasses import dataclass

from .errors import UnauthorizedError


@dataclass(frozen=True)
class AccessContext:
    """Resolved identity of the current caller.

    ``admin`` is the signed-in administrator (``{"id", "email", ...}``) and
    ``voter`` the signed-in voter (``{"id", "voter_id", "election_id"}``).
    Either, both or neither may be set; services decide which one they need.
    """

    admin: dict | None = None
    voter: dict | None = None

    def require_admin(self) -> int:
        """Return the administrator's ID or raise 401."""
        if self.admin is None:
            raise UnauthorizedError("Administrator sign-in required")
        return self.admin["id"]

    def require_voter(self, election_id: int) -> dict:
        """Return the voter signed in to this election or raise 401."""
        if self.voter is None or self.voter["election_id"] != election_id:
            raise UnauthorizedError("Voter sign-in required for this election")
        return self.voter


ANONYMOUS = AccessContext()
