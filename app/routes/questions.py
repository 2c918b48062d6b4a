"""Question and option routes, nested under an election."""
from fastapi import APIRouter, Request
from pydantic import BaseModel

from ..dependencies import get_access_context, wants_json
from .deps import get_election_service, mutation_response
from .elections import render_election_page

router = APIRouter(prefix="/elections/{election_id}/questions", tags=["questions"])


class QuestionCreate(BaseModel):
    title: str
    description: str | None = None


class QuestionUpdate(BaseModel):
    title: str
    description: str | None = None


class OptionCreate(BaseModel):
    title: str


class OptionUpdate(BaseModel):
    title: str


# === Questions ===

@router.get("")
def list_questions(request: Request, election_id: int):
    ctx = get_access_context(request)
    if not wants_json(request):
        return render_election_page(request, ctx, election_id)
    return get_election_service().list_questions(ctx, election_id)


@router.post("")
def create_question(request: Request, election_id: int, data: QuestionCreate):
    question = get_election_service().add_question(
        get_access_context(request), election_id, data.title, data.description
    )
    return mutation_response(request, f"/elections/{election_id}", question=question)


@router.put("/{question_id}")
def update_question(request: Request, election_id: int, question_id: int, data: QuestionUpdate):
    question = get_election_service().edit_question(
        get_access_context(request), election_id, question_id, data.title, data.description
    )
    return mutation_response(request, f"/elections/{election_id}", question=question)


@router.delete("/{question_id}")
def delete_question(request: Request, election_id: int, question_id: int):
    get_election_service().delete_question(get_access_context(request), election_id, question_id)
    return mutation_response(request, f"/elections/{election_id}")


# === Options ===

@router.get("/{question_id}/options")
def list_options(request: Request, election_id: int, question_id: int):
    ctx = get_access_context(request)
    if not wants_json(request):
        return render_election_page(request, ctx, election_id)
    return get_election_service().list_options(ctx, election_id, question_id)


@router.post("/{question_id}/options")
def create_option(request: Request, election_id: int, question_id: int, data: OptionCreate):
    option = get_election_service().add_option(
        get_access_context(request), election_id, question_id, data.title
    )
    return mutation_response(request, f"/elections/{election_id}", option=option)


@router.put("/{question_id}/options/{option_id}")
def update_option(
    request: Request,
    election_id: int,
    question_id: int,
    option_id: int,
    data: OptionUpdate
):
    option = get_election_service().edit_option(
        get_access_context(request), election_id, question_id, option_id, data.title
    )
    return mutation_response(request, f"/elections/{election_id}", option=option)


@router.delete("/{question_id}/options/{option_id}")
def delete_option(request: Request, election_id: int, question_id: int, option_id: int):
    get_election_service().delete_option(
        get_access_context(request), election_id, question_id, option_id
    )
    return mutation_response(request, f"/elections/{election_id}")
