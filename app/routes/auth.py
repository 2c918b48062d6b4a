"""Authentication routes for administrators and voters."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from ..application.errors import VotingError
from ..config import SESSION_COOKIE, SESSION_MAX_AGE, VOTER_SESSION_COOKIE
from ..dependencies import field_text, get_body_fields, get_current_user, get_csrf_token
from .deps import templates, get_auth_service, get_election_service

router = APIRouter()


def _set_session_cookie(response, key: str, session_id: str):
    response.set_cookie(
        key=key,
        value=session_id,
        httponly=True,
        samesite="lax",
        max_age=SESSION_MAX_AGE
    )
    return response


@router.get("/")
def index(request: Request):
    """Send administrators to their dashboard."""
    if get_current_user(request):
        return RedirectResponse(url="/dashboard", status_code=302)
    return RedirectResponse(url="/login", status_code=302)


@router.get("/login")
def login_page(request: Request, error: str = None):
    """Show login page."""
    # If already logged in, redirect to dashboard
    if get_current_user(request):
        return RedirectResponse(url="/dashboard", status_code=302)

    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": error, "email": "", "csrf_token": get_csrf_token(request)}
    )


@router.post("/session")
def login(request: Request, fields: dict = Depends(get_body_fields)):
    """Process administrator login (form or JSON body)."""
    email = field_text(fields, "email")
    service = get_auth_service()
    user = service.authenticate(email, field_text(fields, "password"))

    if not user:
        return templates.TemplateResponse(
            request,
            "login.html",
            {
                "error": "Invalid email or password",
                "email": email,
                "csrf_token": get_csrf_token(request)
            },
            status_code=401
        )

    response = RedirectResponse(url="/dashboard", status_code=302)
    return _set_session_cookie(response, SESSION_COOKIE, service.create_session(user["id"]))


@router.get("/signup")
def signup_page(request: Request):
    """Show administrator sign-up page."""
    return templates.TemplateResponse(
        request,
        "signup.html",
        {"error": None, "form": {}, "csrf_token": get_csrf_token(request)}
    )


@router.post("/users")
def signup(request: Request, fields: dict = Depends(get_body_fields)):
    """Create administrator account and sign in."""
    first_name = field_text(fields, "firstName")
    last_name = field_text(fields, "lastName")
    email = field_text(fields, "email")
    service = get_auth_service()

    try:
        user = service.register(email, field_text(fields, "password"), first_name, last_name)
    except VotingError as exc:
        return templates.TemplateResponse(
            request,
            "signup.html",
            {
                "error": exc.detail,
                "form": {"firstName": first_name, "lastName": last_name, "email": email},
                "csrf_token": get_csrf_token(request)
            },
            status_code=exc.status_code
        )

    response = RedirectResponse(url="/dashboard", status_code=302)
    return _set_session_cookie(response, SESSION_COOKIE, service.create_session(user["id"]))


@router.get("/signout")
def signout(request: Request):
    """Sign out administrator and voter sessions."""
    service = get_auth_service()

    session_id = request.cookies.get(SESSION_COOKIE)
    if session_id:
        service.delete_session(session_id)

    voter_session_id = request.cookies.get(VOTER_SESSION_COOKIE)
    if voter_session_id:
        service.delete_voter_session(voter_session_id)

    response = RedirectResponse(url="/login", status_code=302)
    response.delete_cookie(SESSION_COOKIE)
    response.delete_cookie(VOTER_SESSION_COOKIE)
    return response


@router.post("/session/{election_id}/voter")
def voter_login(request: Request, election_id: int, fields: dict = Depends(get_body_fields)):
    """Sign a voter in to one launched election (form or JSON body)."""
    voter_id = field_text(fields, "voterId")
    service = get_auth_service()
    voter = service.authenticate_voter(election_id, voter_id, field_text(fields, "password"))

    if not voter:
        ballot = get_election_service().get_ballot(election_id)
        return templates.TemplateResponse(
            request,
            "public.html",
            {
                "ballot": ballot,
                "error": "Invalid voter ID or password",
                "voter_id": voter_id,
                "csrf_token": get_csrf_token(request)
            },
            status_code=401
        )

    response = RedirectResponse(url=f"/public/{election_id}/vote", status_code=302)
    return _set_session_cookie(response, VOTER_SESSION_COOKIE, service.create_voter_session(voter))
