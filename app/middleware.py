"""Application middleware."""
import secrets
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import (
    PUBLIC_PATHS, PUBLIC_PREFIXES, SESSION_COOKIE, VOTER_SESSION_COOKIE,
    CSRF_TOKEN_NAME, CSRF_HEADER_NAME, CSRF_COOKIE_NAME, CSRF_EXEMPT_PATHS
)
from .database import get_db
from .infrastructure.repositories import SessionRepository


def is_public_path(path: str) -> bool:
    """Paths reachable without an administrator session."""
    return path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES)


def verify_csrf_token(stored_token: str | None, request_token: str | None) -> bool:
    """Check the submitted token against the one issued to this browser."""
    if not stored_token or not request_token:
        return False
    return secrets.compare_digest(stored_token, request_token)


class AuthMiddleware(BaseHTTPMiddleware):
    """Resolve administrator and voter sessions; guard management routes."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        sessions = SessionRepository(get_db())

        request.state.user = None
        request.state.voter = None

        session_id = request.cookies.get(SESSION_COOKIE)
        if session_id:
            session = sessions.get_valid(session_id)
            if session:
                request.state.user = {
                    "id": session["user_id"],
                    "email": session["email"],
                    "first_name": session["first_name"],
                    "last_name": session["last_name"]
                }

        voter_session_id = request.cookies.get(VOTER_SESSION_COOKIE)
        if voter_session_id:
            voter_session = sessions.get_valid_voter(voter_session_id)
            if voter_session:
                request.state.voter = {
                    "id": voter_session["voter_id"],
                    "voter_id": voter_session["login"],
                    "election_id": voter_session["election_id"]
                }

        if request.state.user or is_public_path(path):
            return await call_next(request)

        # No administrator session - redirect to login
        if request.method == "GET":
            return RedirectResponse(url="/login", status_code=302)

        # For API calls, return 401
        return JSONResponse(
            status_code=401,
            content={"detail": "Not authenticated", "error": "unauthorized"}
        )


class CSRFMiddleware(BaseHTTPMiddleware):
    """Middleware to protect against CSRF attacks."""

    # Methods that require CSRF protection
    PROTECTED_METHODS = {"POST", "PUT", "DELETE", "PATCH"}

    async def dispatch(self, request: Request, call_next):
        # Generate CSRF token if not present
        csrf_token = request.cookies.get(CSRF_COOKIE_NAME)
        if not csrf_token:
            csrf_token = secrets.token_urlsafe(32)

        # Store token in request state for templates
        request.state.csrf_token = csrf_token

        if request.method in self.PROTECTED_METHODS and not self._is_exempt(request.url.path):
            # Token comes from header, or query params for plain HTML forms
            request_token = (
                request.headers.get(CSRF_HEADER_NAME)
                or request.query_params.get(CSRF_TOKEN_NAME)
            )

            stored_token = request.cookies.get(CSRF_COOKIE_NAME)
            if not verify_csrf_token(stored_token, request_token):
                return JSONResponse(
                    status_code=403,
                    content={"detail": "CSRF token missing or invalid", "error": "forbidden"}
                )

        response = await call_next(request)
        return self._set_csrf_cookie(response, csrf_token)

    @staticmethod
    def _is_exempt(path: str) -> bool:
        # Sign-in endpoints, including /session/{election_id}/voter
        if path in CSRF_EXEMPT_PATHS:
            return True
        return path.startswith("/session/") and path.endswith("/voter")

    def _set_csrf_cookie(self, response, token: str):
        """Set CSRF cookie on response."""
        response.set_cookie(
            key=CSRF_COOKIE_NAME,
            value=token,
            httponly=False,  # JavaScript needs to read this
            samesite="lax",
            secure=False,  # Set to True in production with HTTPS
            max_age=60 * 60 * 24  # 24 hours
        )
        return response
