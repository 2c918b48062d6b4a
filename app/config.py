"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Database location (override with VOTING_DATABASE_PATH)
DATABASE_PATH = Path(os.environ.get("VOTING_DATABASE_PATH", str(BASE_DIR / "voting.db")))

# Logging
LOG_LEVEL = os.environ.get("VOTING_LOG_LEVEL", "INFO").upper()

# Session configuration
SESSION_COOKIE = "voting_session"
VOTER_SESSION_COOKIE = "voting_voter_session"
SESSION_HOURS = int(os.environ.get("VOTING_SESSION_HOURS", str(24 * 7)))
SESSION_MAX_AGE = 60 * 60 * SESSION_HOURS

# Paths that don't require an administrator session
PUBLIC_PATHS = {"/login", "/signup", "/session", "/users", "/signout", "/favicon.ico"}
PUBLIC_PREFIXES = ("/public/", "/session/")

# CSRF configuration
CSRF_TOKEN_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_NAME = "voting_csrf"

# Credential endpoints accept POST without a CSRF token (like the login form)
CSRF_EXEMPT_PATHS = {"/session", "/users"}

# Account rules
PASSWORD_MIN_LENGTH = 8
