"""Public ballot routes: election page, ballot form and vote casting."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from ..application.errors import InvalidInputError
from ..dependencies import (
    get_access_context,
    get_body_items,
    get_csrf_token,
    get_current_voter,
    wants_json,
)
from .deps import templates, get_ballot_service, get_election_service

router = APIRouter(prefix="/public", tags=["public"])

ANSWER_PREFIX = "question-"


def parse_answers(items) -> dict[int, int]:
    """Collect ``question-<id>=<option id>`` fields into a mapping.

    Each question may be answered at most once.
    """
    answers = {}
    for key, value in items:
        if not key.startswith(ANSWER_PREFIX):
            continue
        try:
            question_id, option_id = int(key[len(ANSWER_PREFIX):]), int(value)
        except (TypeError, ValueError):
            raise InvalidInputError(f"Malformed answer field: {key}")
        if question_id in answers:
            raise InvalidInputError(f"More than one answer for question {question_id}")
        answers[question_id] = option_id
    return answers


@router.get("/{election_id}")
def election_page(request: Request, election_id: int):
    """Public page of a launched election with the voter sign-in form."""
    ballot = get_election_service().get_ballot(election_id)
    if wants_json(request):
        return ballot

    return templates.TemplateResponse(
        request,
        "public.html",
        {
            "ballot": ballot,
            "error": None,
            "voter_id": "",
            "csrf_token": get_csrf_token(request)
        }
    )


@router.get("/{election_id}/vote")
def ballot_page(request: Request, election_id: int):
    """Ballot form for the signed-in voter."""
    voter = get_current_voter(request)
    if not voter or voter["election_id"] != election_id:
        return RedirectResponse(url=f"/public/{election_id}", status_code=302)

    ballot = get_election_service().get_ballot(election_id)
    return templates.TemplateResponse(
        request,
        "vote.html",
        {
            "ballot": ballot,
            "voter": voter,
            "has_voted": get_ballot_service().has_voted(election_id, voter["id"]),
            "csrf_token": get_csrf_token(request)
        }
    )


@router.post("/{election_id}/cast")
def cast_vote(request: Request, election_id: int, items: list = Depends(get_body_items)):
    """Record the signed-in voter's ballot (form or JSON body)."""
    ctx = get_access_context(request)
    answers = parse_answers(items)

    vote = get_ballot_service().cast_vote(
        ctx,
        election_id,
        ctx.voter["id"] if ctx.voter else None,
        answers
    )

    if wants_json(request):
        return {"status": "ok", "vote": vote}
    return templates.TemplateResponse(
        request,
        "voted.html",
        {"election_id": election_id, "voter": ctx.voter}
    )
