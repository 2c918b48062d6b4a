"""Election management routes."""
from fastapi import APIRouter, Request
from pydantic import BaseModel

from ..application.context import AccessContext
from ..application.errors import InvalidInputError
from ..dependencies import get_access_context, get_csrf_token, require_user, wants_json
from .deps import templates, get_election_service, mutation_response

router = APIRouter(tags=["elections"])


class ElectionCreate(BaseModel):
    name: str


class ElectionUpdate(BaseModel):
    name: str | None = None
    start: bool = False  # launch
    end: bool = False


def render_election_page(request: Request, ctx: AccessContext, election_id: int):
    """Management page of one election with its questions, options and voters."""
    service = get_election_service()
    election = service.get_election(ctx, election_id)

    questions = service.list_questions(ctx, election_id)
    for question in questions:
        question["options"] = service.list_options(ctx, election_id, question["id"])

    return templates.TemplateResponse(
        request,
        "election.html",
        {
            "user": ctx.admin,
            "election": election,
            "questions": questions,
            "voters": service.list_voters(ctx, election_id),
            "csrf_token": get_csrf_token(request)
        }
    )


@router.get("/dashboard")
def dashboard(request: Request):
    """Administrator's list of elections."""
    user = require_user(request)
    elections = get_election_service().list_elections(get_access_context(request))

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"user": user, "elections": elections, "csrf_token": get_csrf_token(request)}
    )


@router.get("/elections")
def list_elections(request: Request):
    """List the caller's elections (JSON on request)."""
    if not wants_json(request):
        return dashboard(request)
    return get_election_service().list_elections(get_access_context(request))


@router.post("/elections")
def create_election(request: Request, data: ElectionCreate):
    """Create a draft election."""
    election = get_election_service().create_election(get_access_context(request), data.name)
    return mutation_response(request, f"/elections/{election['id']}", election=election)


@router.get("/elections/{election_id}")
def get_election(request: Request, election_id: int):
    ctx = get_access_context(request)
    if wants_json(request):
        return get_election_service().get_election(ctx, election_id)
    return render_election_page(request, ctx, election_id)


@router.put("/elections/{election_id}")
def update_election(request: Request, election_id: int, data: ElectionUpdate):
    """Rename, launch (``start``) or end an election; one action per request."""
    ctx = get_access_context(request)
    service = get_election_service()

    actions = [data.name is not None, data.start, data.end]
    if sum(actions) != 1:
        raise InvalidInputError("Provide exactly one of: name, start, end")

    if data.start:
        election = service.launch(ctx, election_id)
    elif data.end:
        election = service.end(ctx, election_id)
    else:
        election = service.rename_election(ctx, election_id, data.name)

    return mutation_response(request, f"/elections/{election_id}", election=election)


@router.delete("/elections/{election_id}")
def delete_election(request: Request, election_id: int):
    """Delete a draft election and everything in it."""
    get_election_service().delete_election(get_access_context(request), election_id)
    return mutation_response(request, "/dashboard")
