"""Voter roster routes, nested under an election."""
from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import get_access_context, wants_json
from .deps import get_election_service, mutation_response
from .elections import render_election_page

router = APIRouter(prefix="/elections/{election_id}/voters", tags=["voters"])


class VoterCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    voter_id: str = Field(alias="voterId")
    password: str


@router.get("")
def list_voters(request: Request, election_id: int):
    ctx = get_access_context(request)
    if not wants_json(request):
        return render_election_page(request, ctx, election_id)
    return get_election_service().list_voters(ctx, election_id)


@router.post("")
def create_voter(request: Request, election_id: int, data: VoterCreate):
    voter = get_election_service().add_voter(
        get_access_context(request), election_id, data.voter_id, data.password
    )
    return mutation_response(request, f"/elections/{election_id}", voter=voter)


@router.delete("/{voter_id}")
def delete_voter(request: Request, election_id: int, voter_id: int):
    """Remove voter (by row ID) from the roster."""
    get_election_service().delete_voter(get_access_context(request), election_id, voter_id)
    return mutation_response(request, f"/elections/{election_id}")
