"""Shared FastAPI dependencies."""
from fastapi import Request

from .application.context import AccessContext
from .application.errors import InvalidInputError, UnauthorizedError


def get_current_user(request: Request) -> dict | None:
    """Get signed-in administrator from request state."""
    return getattr(request.state, "user", None)


def require_user(request: Request) -> dict:
    """Require administrator session, raise 401 if not authenticated."""
    user = get_current_user(request)
    if not user:
        raise UnauthorizedError()
    return user


def get_current_voter(request: Request) -> dict | None:
    """Get signed-in voter from request state."""
    return getattr(request.state, "voter", None)


def get_access_context(request: Request) -> AccessContext:
    """Build the explicit identity passed into service calls."""
    return AccessContext(admin=get_current_user(request), voter=get_current_voter(request))


def get_csrf_token(request: Request) -> str:
    """Get CSRF token from request state."""
    return getattr(request.state, "csrf_token", "")


def wants_json(request: Request) -> bool:
    """True when the client asked for JSON rather than a page."""
    return "application/json" in request.headers.get("accept", "")


def is_json_body(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith("application/json")


async def get_body_items(request: Request) -> list[tuple[str, object]]:
    """Submitted fields as ``(name, value)`` pairs, repeated names included.

    Accepts a JSON object or a form-encoded/multipart body.
    """
    if is_json_body(request):
        try:
            data = await request.json()
        except ValueError:
            raise InvalidInputError("Malformed JSON body")
        if not isinstance(data, dict):
            raise InvalidInputError("Request body must be a JSON object")
        return list(data.items())

    form = await request.form()
    return form.multi_items()


async def get_body_fields(request: Request) -> dict:
    """Submitted fields as a mapping (last value wins for repeated names)."""
    return dict(await get_body_items(request))


def field_text(fields: dict, name: str) -> str:
    """Text value of a submitted field, empty when absent."""
    value = fields.get(name)
    return "" if value is None else str(value)
