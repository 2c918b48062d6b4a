"""SQLite connection handling and schema."""
import sqlite3
import threading
from pathlib import Path

from .config import DATABASE_PATH

# Thread-local storage for database connections
_local = threading.local()


def create_connection(path: Path | None = None) -> sqlite3.Connection:
    """Open a new connection with row access by column name."""
    conn = sqlite3.connect(path or DATABASE_PATH, timeout=10)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_db() -> sqlite3.Connection:
    """Get thread-local database connection.

    The connection is re-opened when DATABASE_PATH has changed since it was
    created, so a worker thread never keeps talking to a stale database.
    """
    conn = getattr(_local, "connection", None)
    if conn is None or getattr(_local, "path", None) != DATABASE_PATH:
        if conn is not None:
            conn.close()
        _local.connection = create_connection(DATABASE_PATH)
        _local.path = DATABASE_PATH
    return _local.connection


def close_db():
    """Close this thread's connection, if any."""
    conn = getattr(_local, "connection", None)
    if conn is not None:
        conn.close()
    _local.connection = None
    _local.path = None


def init_db():
    """Initialize database schema"""
    db = get_db()

    # Administrators
    db.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            first_name TEXT NOT NULL,
            last_name TEXT NOT NULL DEFAULT '',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Administrator login sessions
    db.execute("""
        CREATE TABLE IF NOT EXISTS sessions (
            id TEXT PRIMARY KEY,
            user_id INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            expires_at TIMESTAMP NOT NULL,
            FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
        )
    """)

    db.execute("""
        CREATE TABLE IF NOT EXISTS elections (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            user_id INTEGER NOT NULL,
            status TEXT NOT NULL DEFAULT 'draft'
                CHECK(status IN ('draft', 'launched', 'ended')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            launched_at TIMESTAMP,
            ended_at TIMESTAMP,
            FOREIGN KEY (user_id) REFERENCES users(id)
        )
    """)

    db.execute("""
        CREATE TABLE IF NOT EXISTS questions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            election_id INTEGER NOT NULL,
            title TEXT NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            position INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (election_id) REFERENCES elections(id)
        )
    """)

    db.execute("""
        CREATE TABLE IF NOT EXISTS options (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            question_id INTEGER NOT NULL,
            title TEXT NOT NULL,
            position INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY (question_id) REFERENCES questions(id)
        )
    """)

    # voter_id is the login handle, unique per election
    db.execute("""
        CREATE TABLE IF NOT EXISTS voters (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            election_id INTEGER NOT NULL,
            voter_id TEXT NOT NULL,
            password_hash TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (election_id) REFERENCES elections(id),
            UNIQUE(election_id, voter_id)
        )
    """)

    db.execute("""
        CREATE TABLE IF NOT EXISTS voter_sessions (
            id TEXT PRIMARY KEY,
            voter_id INTEGER NOT NULL,
            election_id INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            expires_at TIMESTAMP NOT NULL,
            FOREIGN KEY (voter_id) REFERENCES voters(id),
            FOREIGN KEY (election_id) REFERENCES elections(id)
        )
    """)

    # votes.voter_id references voters.id; one vote per voter per election
    db.execute("""
        CREATE TABLE IF NOT EXISTS votes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            election_id INTEGER NOT NULL,
            voter_id INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (election_id) REFERENCES elections(id),
            FOREIGN KEY (voter_id) REFERENCES voters(id),
            UNIQUE(election_id, voter_id)
        )
    """)

    db.execute("""
        CREATE TABLE IF NOT EXISTS vote_answers (
            vote_id INTEGER NOT NULL,
            question_id INTEGER NOT NULL,
            option_id INTEGER NOT NULL,
            PRIMARY KEY (vote_id, question_id),
            FOREIGN KEY (vote_id) REFERENCES votes(id),
            FOREIGN KEY (question_id) REFERENCES questions(id),
            FOREIGN KEY (option_id) REFERENCES options(id)
        )
    """)

    db.execute("CREATE INDEX IF NOT EXISTS idx_elections_user_id ON elections(user_id)")
    db.execute("CREATE INDEX IF NOT EXISTS idx_questions_election_id ON questions(election_id)")
    db.execute("CREATE INDEX IF NOT EXISTS idx_options_question_id ON options(question_id)")
    db.execute("CREATE INDEX IF NOT EXISTS idx_voters_election_id ON voters(election_id)")

    db.commit()


def cleanup_expired_sessions():
    """Remove expired administrator and voter sessions"""
    from .infrastructure.repositories import SessionRepository

    return SessionRepository(get_db()).cleanup_expired()
