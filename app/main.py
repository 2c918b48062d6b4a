"""Online Voting Application - FastAPI Entry Point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .application.errors import VotingError
from .config import LOG_LEVEL
from .database import init_db, cleanup_expired_sessions
from .middleware import AuthMiddleware, CSRFMiddleware

# Import routers
from .routes.auth import router as auth_router
from .routes.elections import router as elections_router
from .routes.questions import router as questions_router
from .routes.voters import router as voters_router
from .routes.public import router as public_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    init_db()
    removed = cleanup_expired_sessions()
    logger.info("Database ready, %s expired sessions removed", removed)
    yield


app = FastAPI(title="Online Voting", lifespan=lifespan)

# Add middleware (order matters - first added = last executed)
app.add_middleware(AuthMiddleware)
app.add_middleware(CSRFMiddleware)


@app.exception_handler(VotingError)
async def voting_error_handler(request: Request, exc: VotingError):
    """Render service errors as JSON with a machine-readable kind."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.code}
    )


# Include routers
app.include_router(auth_router)
app.include_router(elections_router)
app.include_router(questions_router)
app.include_router(voters_router)
app.include_router(public_router)
