"""Election service - elections, questions, options and voter rosters.

All management operations are scoped to the administrator that owns the
election. Structural changes (questions, options, voters, name) are only
accepted while the election is a draft.
"""
import logging
import sqlite3
from typing import Dict, List, Optional

from ...infrastructure.repositories import (
    ElectionRepository, QuestionRepository, OptionRepository, VoterRepository, is_unique_violation
)
from ...infrastructure.repositories.election_repository import DRAFT, LAUNCHED
from ..context import AccessContext
from ..errors import (
    ConflictError, ForbiddenError, InvalidInputError, InvalidStateError, NotFoundError
)

logger = logging.getLogger(__name__)

LOCKED = "Election can no longer be changed"


class ElectionService:
    """Service for managing elections.

    Responsibilities:
    - Create/rename/delete elections
    - Manage questions and their options
    - Manage the voter roster
    - Drive the lifecycle (draft -> launched -> ended)
    - Serve the public ballot of a launched election
    """

    def __init__(
        self,
        election_repository: ElectionRepository,
        question_repository: QuestionRepository,
        option_repository: OptionRepository,
        voter_repository: VoterRepository
    ):
        self.election_repo = election_repository
        self.question_repo = question_repository
        self.option_repo = option_repository
        self.voter_repo = voter_repository

    # ========================================================================
    # Election CRUD
    # ========================================================================

    def list_elections(self, ctx: AccessContext) -> List[Dict]:
        """Elections owned by the caller, in creation order."""
        return self.election_repo.list_by_user(ctx.require_admin())

    def get_election(self, ctx: AccessContext, election_id: int) -> Dict:
        return self._owned_election(ctx, election_id)

    def create_election(self, ctx: AccessContext, name: str) -> Dict:
        """Create a draft election.

        Returns:
            Created election dict (includes its ``id``)
        """
        user_id = ctx.require_admin()
        name = self._required(name, "Election name")

        election_id = self.election_repo.create(name, user_id)
        logger.info("Election %s created by administrator %s", election_id, user_id)
        return self.election_repo.get_by_id(election_id)

    def rename_election(self, ctx: AccessContext, election_id: int, name: str) -> Dict:
        self._draft_election(ctx, election_id)
        name = self._required(name, "Election name")

        if not self.election_repo.update_name(election_id, name):
            raise InvalidStateError("Only draft elections can be renamed")
        return self.election_repo.get_by_id(election_id)

    def delete_election(self, ctx: AccessContext, election_id: int) -> bool:
        """Delete a draft election together with its questions, options and voters."""
        self._draft_election(ctx, election_id)

        if not self.election_repo.delete(election_id):
            raise InvalidStateError(LOCKED)
        logger.info("Election %s deleted", election_id)
        return True

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def launch(self, ctx: AccessContext, election_id: int) -> Dict:
        """Open a draft election for voting. Irreversible.

        Raises:
            InvalidStateError: already launched/ended, no questions, or a
                question without options
        """
        election = self._owned_election(ctx, election_id)
        if election["status"] != DRAFT:
            raise InvalidStateError("Election has already been launched")

        questions = self.question_repo.list_by_election(election_id)
        if not questions:
            raise InvalidStateError("Add at least one question before launching")

        with_options = {option["question_id"] for option in self.option_repo.list_by_election(election_id)}
        empty = [q["title"] for q in questions if q["id"] not in with_options]
        if empty:
            raise InvalidStateError(f"Question has no options: {empty[0]}")

        if not self.election_repo.launch(election_id):
            raise InvalidStateError("Election could not be launched")

        logger.info("Election %s launched", election_id)
        return self.election_repo.get_by_id(election_id)

    def end(self, ctx: AccessContext, election_id: int) -> Dict:
        """Close a launched election to further votes. Irreversible."""
        election = self._owned_election(ctx, election_id)
        if election["status"] != LAUNCHED or not self.election_repo.end(election_id):
            raise InvalidStateError("Only launched elections can be ended")

        logger.info("Election %s ended", election_id)
        return self.election_repo.get_by_id(election_id)

    # ========================================================================
    # Questions
    # ========================================================================

    def list_questions(self, ctx: AccessContext, election_id: int) -> List[Dict]:
        self._owned_election(ctx, election_id)
        return self.question_repo.list_by_election(election_id)

    def add_question(
        self,
        ctx: AccessContext,
        election_id: int,
        title: str,
        description: Optional[str] = None
    ) -> Dict:
        self._draft_election(ctx, election_id)
        title = self._required(title, "Question title")

        question_id = self.question_repo.create(election_id, title, (description or "").strip())
        if question_id is None:
            raise InvalidStateError(LOCKED)
        return self.question_repo.get_by_id(question_id)

    def edit_question(
        self,
        ctx: AccessContext,
        election_id: int,
        question_id: int,
        title: str,
        description: Optional[str] = None
    ) -> Dict:
        self._draft_election(ctx, election_id)
        self._question_of(election_id, question_id)
        title = self._required(title, "Question title")

        updated = self.question_repo.update(
            question_id, title, description.strip() if description is not None else None
        )
        if not updated:
            raise InvalidStateError(LOCKED)
        return self.question_repo.get_by_id(question_id)

    def delete_question(self, ctx: AccessContext, election_id: int, question_id: int) -> bool:
        self._draft_election(ctx, election_id)
        self._question_of(election_id, question_id)
        if not self.question_repo.delete(question_id):
            raise InvalidStateError(LOCKED)
        return True

    # ========================================================================
    # Options
    # ========================================================================

    def list_options(self, ctx: AccessContext, election_id: int, question_id: int) -> List[Dict]:
        self._owned_election(ctx, election_id)
        self._question_of(election_id, question_id)
        return self.option_repo.list_by_question(question_id)

    def add_option(self, ctx: AccessContext, election_id: int, question_id: int, title: str) -> Dict:
        self._draft_election(ctx, election_id)
        self._question_of(election_id, question_id)
        title = self._required(title, "Option title")

        option_id = self.option_repo.create(question_id, title)
        if option_id is None:
            raise InvalidStateError(LOCKED)
        return self.option_repo.get_by_id(option_id)

    def edit_option(
        self,
        ctx: AccessContext,
        election_id: int,
        question_id: int,
        option_id: int,
        title: str
    ) -> Dict:
        self._draft_election(ctx, election_id)
        self._option_of(election_id, question_id, option_id)
        title = self._required(title, "Option title")

        if not self.option_repo.update(option_id, title):
            raise InvalidStateError(LOCKED)
        return self.option_repo.get_by_id(option_id)

    def delete_option(self, ctx: AccessContext, election_id: int, question_id: int, option_id: int) -> bool:
        self._draft_election(ctx, election_id)
        self._option_of(election_id, question_id, option_id)
        if not self.option_repo.delete(option_id):
            raise InvalidStateError(LOCKED)
        return True

    # ========================================================================
    # Voters
    # ========================================================================

    def list_voters(self, ctx: AccessContext, election_id: int) -> List[Dict]:
        self._owned_election(ctx, election_id)
        return self.voter_repo.list_by_election(election_id)

    def add_voter(self, ctx: AccessContext, election_id: int, voter_id: str, password: str) -> Dict:
        """Add voter to the roster.

        Raises:
            ConflictError: the voter ID is already on this election's roster
        """
        self._draft_election(ctx, election_id)
        voter_id = self._required(voter_id, "Voter ID")
        if not password:
            raise InvalidInputError("Voter password is required")

        try:
            voter_pk = self.voter_repo.create(election_id, voter_id, password)
        except sqlite3.IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise ConflictError(f"Voter ID already exists: {voter_id}")
        if voter_pk is None:
            raise InvalidStateError(LOCKED)
        return self.voter_repo.get_by_id(voter_pk)

    def delete_voter(self, ctx: AccessContext, election_id: int, voter_pk: int) -> bool:
        self._draft_election(ctx, election_id)
        voter = self.voter_repo.get_by_id(voter_pk)
        if not voter or voter["election_id"] != election_id:
            raise NotFoundError("Voter not found")
        if not self.voter_repo.delete(voter_pk):
            raise InvalidStateError(LOCKED)
        return True

    # ========================================================================
    # Public ballot
    # ========================================================================

    def get_ballot(self, election_id: int) -> Dict:
        """Election name, questions and options of a launched election.

        Raises:
            NotFoundError: unknown election
            ForbiddenError: election is not open for voting
        """
        election = self.election_repo.get_by_id(election_id)
        if not election:
            raise NotFoundError("Election not found")
        if election["status"] != LAUNCHED:
            raise ForbiddenError("Election is not open for voting")

        questions = self.question_repo.list_by_election(election_id)
        options_by_question: Dict[int, List[Dict]] = {q["id"]: [] for q in questions}
        for option in self.option_repo.list_by_election(election_id):
            options_by_question[option["question_id"]].append(
                {"id": option["id"], "title": option["title"]}
            )

        return {
            "id": election["id"],
            "name": election["name"],
            "status": election["status"],
            "questions": [
                {
                    "id": q["id"],
                    "title": q["title"],
                    "description": q["description"],
                    "options": options_by_question[q["id"]],
                }
                for q in questions
            ],
        }

    # ========================================================================
    # Helpers
    # ========================================================================

    def _owned_election(self, ctx: AccessContext, election_id: int) -> Dict:
        """Election owned by the caller, or raise 401/404/403."""
        user_id = ctx.require_admin()
        election = self.election_repo.get_by_id(election_id)
        if not election:
            raise NotFoundError("Election not found")
        if election["user_id"] != user_id:
            raise ForbiddenError("Not your election")
        return election

    def _draft_election(self, ctx: AccessContext, election_id: int) -> Dict:
        election = self._owned_election(ctx, election_id)
        if election["status"] != DRAFT:
            raise InvalidStateError(LOCKED)
        return election

    def _question_of(self, election_id: int, question_id: int) -> Dict:
        question = self.question_repo.get_by_id(question_id)
        if not question or question["election_id"] != election_id:
            raise NotFoundError("Question not found")
        return question

    def _option_of(self, election_id: int, question_id: int, option_id: int) -> Dict:
        self._question_of(election_id, question_id)
        option = self.option_repo.get_by_id(option_id)
        if not option or option["question_id"] != question_id:
            raise NotFoundError("Option not found")
        return option

    @staticmethod
    def _required(value: Optional[str], label: str) -> str:
        value = (value or "").strip()
        if not value:
            raise InvalidInputError(f"{label} is required")
        return value
