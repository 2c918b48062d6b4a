"""Test configuration and fixtures for the voting application.

This module provides isolated test environments:
- Temporary database (SQLite)
- Fresh administrator sessions for each test
- Helpers to build elections and sign voters in
"""
import os
import sys
import sqlite3
from pathlib import Path
from typing import Generator, Dict
from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient

# Ensure app is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment BEFORE importing app modules
os.environ["VOTING_LOG_LEVEL"] = "WARNING"

JSON = {"Accept": "application/json"}


@pytest.fixture(scope="function")
def isolated_environment(tmp_path: Path) -> Dict:
    """Create completely isolated environment for a single test.

    Returns:
        Dict with paths: db_path, base_dir
    """
    return {
        "db_path": tmp_path / "test.db",
        "base_dir": tmp_path
    }


@pytest.fixture(scope="function")
def patched_config(isolated_environment: Dict):
    """Point the database module at the isolated database."""
    import app.database as db_module

    original = db_module.DATABASE_PATH
    db_module.DATABASE_PATH = isolated_environment["db_path"]

    yield isolated_environment

    db_module.DATABASE_PATH = original


@pytest.fixture(scope="function")
def fresh_database(patched_config: Dict):
    """Initialize fresh database with schema for each test."""
    from app.database import init_db, close_db

    close_db()
    init_db()

    yield patched_config["db_path"]

    close_db()


@pytest.fixture(scope="function")
def db_connection(fresh_database: Path) -> Generator[sqlite3.Connection, None, None]:
    """Separate connection to the test database for direct inspection."""
    from app.database import create_connection

    conn = create_connection(fresh_database)
    yield conn
    conn.close()


@pytest.fixture(scope="function")
def client(fresh_database: Path) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated environment.

    Usage:
        def test_something(client):
            response = client.get("/login")
            assert response.status_code == 200
    """
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


def _create_admin(email: str, password: str, first_name: str) -> Dict:
    from app.database import get_db
    from app.infrastructure.repositories import UserRepository

    credentials = {"email": email, "password": password, "first_name": first_name}
    credentials["id"] = UserRepository(get_db()).create(email, password, first_name, "Test")
    return credentials


@pytest.fixture(scope="function")
def test_admin(client: TestClient) -> Dict:
    """Create an administrator and return credentials.

    Returns:
        Dict with: id, email, password, first_name
    """
    return _create_admin("user.a@test.com", "12345678", "User A")


@pytest.fixture(scope="function")
def second_admin(client: TestClient) -> Dict:
    """Create a second administrator for ownership testing."""
    return _create_admin("user.b@test.com", "87654321", "User B")


@pytest.fixture(scope="function")
def authenticated_client(client: TestClient, test_admin: Dict) -> TestClient:
    """Client signed in as test_admin.

    Usage:
        def test_protected(authenticated_client):
            response = authenticated_client.get("/dashboard")
            assert response.status_code == 200  # Not 302 redirect to login
    """
    login(client, test_admin["email"], test_admin["password"])
    return client


@pytest.fixture(scope="function")
def csrf_token(client: TestClient) -> str:
    """CSRF token issued to the client (from the double-submit cookie)."""
    client.get("/login")
    token = client.cookies.get("voting_csrf")
    assert token, "CSRF cookie should be set"
    return token


@pytest.fixture(scope="function")
def csrf_headers(csrf_token: str) -> Dict:
    """Headers for a JSON mutation carrying the CSRF token."""
    return {"X-CSRF-Token": csrf_token, **JSON}


@pytest.fixture(scope="function")
def draft_election(authenticated_client: TestClient, csrf_headers: Dict) -> Dict:
    """Draft election with one question, two options and two voters.

    Returns:
        Dict with: id, question_id, option_ids, voter_ids (row IDs)
    """
    return build_election(authenticated_client, csrf_headers)


@pytest.fixture(scope="function")
def launched_election(authenticated_client: TestClient, csrf_headers: Dict, draft_election: Dict) -> Dict:
    """The draft_election fixture after launch."""
    response = authenticated_client.put(
        f"/elections/{draft_election['id']}",
        json={"start": True},
        headers=csrf_headers
    )
    assert response.status_code == 200, response.text
    return draft_election


# ============================================================================
# Helpers
# ============================================================================

def login(client: TestClient, email: str, password: str):
    """Sign an administrator in on this client."""
    response = client.post(
        "/session",
        data={"email": email, "password": password},
        follow_redirects=False
    )
    assert response.status_code == 302, "Login should redirect to dashboard"
    assert "voting_session" in response.cookies, "Session cookie should be set"
    return response


def build_election(client: TestClient, headers: Dict, name: str = "WC 2022: Trivia") -> Dict:
    """Create an election with one question, two options and voters voter1/voter2."""
    election = client.post("/elections", json={"name": name}, headers=headers).json()["election"]
    eid = election["id"]

    question = client.post(
        f"/elections/{eid}/questions",
        json={"title": "Who will win the world cup?", "description": "Les Bleus vs La Albiceleste"},
        headers=headers
    ).json()["question"]
    qid = question["id"]

    option_ids = [
        client.post(
            f"/elections/{eid}/questions/{qid}/options",
            json={"title": title},
            headers=headers
        ).json()["option"]["id"]
        for title in ("🇦🇷 Argentina", "🇫🇷 France")
    ]

    voter_ids = [
        client.post(
            f"/elections/{eid}/voters",
            json={"voterId": handle, "password": handle},
            headers=headers
        ).json()["voter"]["id"]
        for handle in ("voter1", "voter2")
    ]

    return {"id": eid, "question_id": qid, "option_ids": option_ids, "voter_ids": voter_ids}


@contextmanager
def voter_client(app_client: TestClient, election_id: int, voter_id: str, password: str):
    """Fresh client signed in as a voter of one election.

    Usage:
        with voter_client(client, eid, "voter1", "voter1") as voter:
            voter.post(f"/public/{eid}/cast", ...)
    """
    with TestClient(app_client.app) as voter:
        response = voter.get(f"/public/{election_id}")
        assert response.status_code == 200
        response = voter.post(
            f"/session/{election_id}/voter",
            data={"voterId": voter_id, "password": password},
            follow_redirects=False
        )
        assert response.status_code == 302, response.text
        yield voter


def cast(voter: TestClient, election_id: int, answers: Dict[int, int], headers: Dict | None = None):
    """Submit the ballot form as the given voter client."""
    data = {f"question-{qid}": str(oid) for qid, oid in answers.items()}
    return voter.post(
        f"/public/{election_id}/cast",
        data=data,
        headers=headers or {"X-CSRF-Token": voter.cookies.get("voting_csrf")}
    )
