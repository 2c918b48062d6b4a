"""
Question and option integration tests.

Verifies:
- Question CRUD within a draft election
- Option CRUD within a question
- Structure is locked once the election is launched
"""
from fastapi.testclient import TestClient

from tests.conftest import JSON


def list_questions(client: TestClient, election_id: int) -> list:
    response = client.get(f"/elections/{election_id}/questions", headers=JSON)
    assert response.status_code == 200
    return response.json()


def list_options(client: TestClient, election_id: int, question_id: int) -> list:
    response = client.get(f"/elections/{election_id}/questions/{question_id}/options", headers=JSON)
    assert response.status_code == 200
    return response.json()


class TestQuestions:
    """Question management."""

    def test_create_question(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        eid = draft_election["id"]
        count = len(list_questions(authenticated_client, eid))

        response = authenticated_client.post(
            f"/elections/{eid}/questions",
            json={"title": "Who will score first?"},
            headers=csrf_headers
        )

        assert response.status_code == 200
        question = response.json()["question"]
        assert question["title"] == "Who will score first?"
        assert question["description"] == ""

        questions = list_questions(authenticated_client, eid)
        assert len(questions) == count + 1
        assert questions[-1]["id"] == question["id"]

    def test_edit_question(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        eid, qid = draft_election["id"], draft_election["question_id"]

        response = authenticated_client.put(
            f"/elections/{eid}/questions/{qid}",
            json={"title": "Edit title", "description": "Edit description"},
            headers=csrf_headers
        )

        assert response.status_code == 200
        question = list_questions(authenticated_client, eid)[0]
        assert question["title"] == "Edit title"
        assert question["description"] == "Edit description"

    def test_edit_title_keeps_description(
        self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict
    ):
        eid, qid = draft_election["id"], draft_election["question_id"]

        authenticated_client.put(
            f"/elections/{eid}/questions/{qid}", json={"title": "Only title"}, headers=csrf_headers
        )

        question = list_questions(authenticated_client, eid)[0]
        assert question["title"] == "Only title"
        assert question["description"] == "Les Bleus vs La Albiceleste"

    def test_question_requires_title(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        response = authenticated_client.post(
            f"/elections/{draft_election['id']}/questions", json={"title": ""}, headers=csrf_headers
        )

        assert response.status_code == 400

    def test_delete_question_removes_options(
        self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict, db_connection
    ):
        eid, qid = draft_election["id"], draft_election["question_id"]

        response = authenticated_client.delete(f"/elections/{eid}/questions/{qid}", headers=csrf_headers)

        assert response.status_code == 200
        assert list_questions(authenticated_client, eid) == []
        remaining = db_connection.execute(
            "SELECT COUNT(*) FROM options WHERE question_id = ?", (qid,)
        ).fetchone()[0]
        assert remaining == 0

    def test_question_of_other_election_not_found(
        self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict
    ):
        other = authenticated_client.post(
            "/elections", json={"name": "Other"}, headers=csrf_headers
        ).json()["election"]["id"]

        response = authenticated_client.put(
            f"/elections/{other}/questions/{draft_election['question_id']}",
            json={"title": "Moved"},
            headers=csrf_headers
        )

        assert response.status_code == 404


class TestOptions:
    """Option management."""

    def test_create_option(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        eid, qid = draft_election["id"], draft_election["question_id"]

        response = authenticated_client.post(
            f"/elections/{eid}/questions/{qid}/options",
            json={"title": "🇭🇷 Croatia"},
            headers=csrf_headers
        )

        assert response.status_code == 200
        titles = [o["title"] for o in list_options(authenticated_client, eid, qid)]
        assert titles == ["🇦🇷 Argentina", "🇫🇷 France", "🇭🇷 Croatia"]

    def test_edit_option(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        eid, qid = draft_election["id"], draft_election["question_id"]
        oid = draft_election["option_ids"][0]

        response = authenticated_client.put(
            f"/elections/{eid}/questions/{qid}/options/{oid}",
            json={"title": "Argentina"},
            headers=csrf_headers
        )

        assert response.status_code == 200
        assert response.json()["option"]["title"] == "Argentina"

    def test_delete_option(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        eid, qid = draft_election["id"], draft_election["question_id"]
        oid = draft_election["option_ids"][1]

        response = authenticated_client.delete(
            f"/elections/{eid}/questions/{qid}/options/{oid}", headers=csrf_headers
        )

        assert response.status_code == 200
        assert [o["id"] for o in list_options(authenticated_client, eid, qid)] == draft_election["option_ids"][:1]

    def test_option_of_other_question_not_found(
        self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict
    ):
        eid = draft_election["id"]
        other_qid = authenticated_client.post(
            f"/elections/{eid}/questions", json={"title": "Second"}, headers=csrf_headers
        ).json()["question"]["id"]

        response = authenticated_client.delete(
            f"/elections/{eid}/questions/{other_qid}/options/{draft_election['option_ids'][0]}",
            headers=csrf_headers
        )

        assert response.status_code == 404


class TestLockedAfterLaunch:
    """Questions and options cannot change once voting is open."""

    def test_add_question_after_launch(
        self, authenticated_client: TestClient, csrf_headers: dict, launched_election: dict
    ):
        response = authenticated_client.post(
            f"/elections/{launched_election['id']}/questions",
            json={"title": "Late question"},
            headers=csrf_headers
        )

        assert response.status_code == 423

    def test_edit_and_delete_question_after_launch(
        self, authenticated_client: TestClient, csrf_headers: dict, launched_election: dict
    ):
        url = f"/elections/{launched_election['id']}/questions/{launched_election['question_id']}"

        assert authenticated_client.put(url, json={"title": "x"}, headers=csrf_headers).status_code == 423
        assert authenticated_client.delete(url, headers=csrf_headers).status_code == 423

    def test_option_changes_after_launch(
        self, authenticated_client: TestClient, csrf_headers: dict, launched_election: dict
    ):
        base = f"/elections/{launched_election['id']}/questions/{launched_election['question_id']}/options"
        oid = launched_election["option_ids"][0]

        assert authenticated_client.post(base, json={"title": "x"}, headers=csrf_headers).status_code == 423
        assert authenticated_client.put(f"{base}/{oid}", json={"title": "x"}, headers=csrf_headers).status_code == 423
        assert authenticated_client.delete(f"{base}/{oid}", headers=csrf_headers).status_code == 423

    def test_questions_still_listed_after_launch(
        self, authenticated_client: TestClient, launched_election: dict
    ):
        questions = list_questions(authenticated_client, launched_election["id"])

        assert [q["id"] for q in questions] == [launched_election["question_id"]]
