"""Ballot service - validates and records votes."""
import logging
import sqlite3
from typing import Dict

from ...infrastructure.repositories import (
    ElectionRepository, QuestionRepository, OptionRepository, VoteRepository, is_unique_violation
)
from ...infrastructure.repositories.election_repository import LAUNCHED
from ..context import AccessContext
from ..errors import (
    ConflictError, InvalidInputError, InvalidStateError, NotFoundError, UnauthorizedError
)

logger = logging.getLogger(__name__)


class BallotService:
    """Service for casting votes.

    A voter signed in to a launched election may cast exactly one vote,
    answering every question of the election with one of its options.
    """

    def __init__(
        self,
        election_repository: ElectionRepository,
        question_repository: QuestionRepository,
        option_repository: OptionRepository,
        vote_repository: VoteRepository
    ):
        self.election_repo = election_repository
        self.question_repo = question_repository
        self.option_repo = option_repository
        self.vote_repo = vote_repository

    def cast_vote(
        self,
        ctx: AccessContext,
        election_id: int,
        voter_id: int,
        answers: Dict[int, int]
    ) -> Dict:
        """Record the voter's choices.

        Args:
            ctx: Caller identity; must be a voter session for this election
            election_id: Election ID
            voter_id: Voter row ID the vote is cast as
            answers: Mapping of question ID to chosen option ID

        Returns:
            Vote dict with ``id``, ``election_id``, ``voter_id`` and ``answers``

        Raises:
            NotFoundError: unknown election
            InvalidStateError: election is not launched
            UnauthorizedError: caller is not this voter of this election
            ConflictError: voter already voted
            InvalidInputError: answers do not cover every question exactly once
                with an option of that question
        """
        election = self.election_repo.get_by_id(election_id)
        if not election:
            raise NotFoundError("Election not found")
        if election["status"] != LAUNCHED:
            raise InvalidStateError("Election is not open for voting")

        voter = ctx.require_voter(election_id)
        if voter["id"] != voter_id:
            raise UnauthorizedError("Votes can only be cast as the signed-in voter")

        if self.vote_repo.exists(election_id, voter_id):
            logger.warning("Duplicate vote rejected in election %s", election_id)
            raise ConflictError("You have already voted in this election")

        self._validate_answers(election_id, answers)

        try:
            vote_id = self.vote_repo.create(election_id, voter_id, answers)
        except sqlite3.IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            logger.warning("Duplicate vote rejected in election %s", election_id)
            raise ConflictError("You have already voted in this election")

        logger.info("Vote %s recorded in election %s", vote_id, election_id)
        return {
            "id": vote_id,
            "election_id": election_id,
            "voter_id": voter_id,
            "answers": dict(answers),
        }

    def has_voted(self, election_id: int, voter_id: int) -> bool:
        return self.vote_repo.exists(election_id, voter_id)

    def _validate_answers(self, election_id: int, answers: Dict[int, int]) -> None:
        question_ids = {q["id"] for q in self.question_repo.list_by_election(election_id)}
        option_question = {
            option["id"]: option["question_id"]
            for option in self.option_repo.list_by_election(election_id)
        }

        missing = question_ids - set(answers)
        if missing:
            raise InvalidInputError(f"Missing answer for question {min(missing)}")

        unknown = set(answers) - question_ids
        if unknown:
            raise InvalidInputError(f"Question {min(unknown)} is not part of this election")

        for question_id, option_id in answers.items():
            if option_question.get(option_id) != question_id:
                raise InvalidInputError(
                    f"Option {option_id} is not a choice for question {question_id}"
                )
