"""Shared helpers for route modules.

Factory functions build services over the current thread's connection;
response helpers pick between a page redirect and JSON.
"""
from fastapi import Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ..application.services import AuthService, ElectionService, BallotService
from ..config import TEMPLATES_DIR
from ..database import get_db
from ..dependencies import wants_json
from ..infrastructure.repositories import (
    UserRepository, SessionRepository, ElectionRepository, QuestionRepository,
    OptionRepository, VoterRepository, VoteRepository
)

templates = Jinja2Templates(directory=TEMPLATES_DIR)


def get_auth_service(db=None) -> AuthService:
    """Create AuthService with repositories."""
    db = db or get_db()
    return AuthService(
        user_repository=UserRepository(db),
        session_repository=SessionRepository(db),
        voter_repository=VoterRepository(db),
        election_repository=ElectionRepository(db)
    )


def get_election_service(db=None) -> ElectionService:
    """Create ElectionService with repositories."""
    db = db or get_db()
    return ElectionService(
        election_repository=ElectionRepository(db),
        question_repository=QuestionRepository(db),
        option_repository=OptionRepository(db),
        voter_repository=VoterRepository(db)
    )


def get_ballot_service(db=None) -> BallotService:
    """Create BallotService with repositories."""
    db = db or get_db()
    return BallotService(
        election_repository=ElectionRepository(db),
        question_repository=QuestionRepository(db),
        option_repository=OptionRepository(db),
        vote_repository=VoteRepository(db)
    )


def mutation_response(request: Request, redirect_url: str, **payload):
    """Answer a successful management mutation.

    JSON clients get ``{"status": "ok", ...payload}``; browsers are sent to
    ``redirect_url`` with 303 so the follow-up request is a GET.
    """
    if wants_json(request):
        return {"status": "ok", **payload}
    return RedirectResponse(url=redirect_url, status_code=303)
