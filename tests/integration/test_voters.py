"""
Voter roster integration tests.

Verifies:
- Adding and removing voters while the election is a draft
- Voter ID uniqueness within one election
- Credentials never leave the server
"""
from fastapi.testclient import TestClient

from tests.conftest import JSON


def list_voters(client: TestClient, election_id: int) -> list:
    response = client.get(f"/elections/{election_id}/voters", headers=JSON)
    assert response.status_code == 200
    return response.json()


class TestVoterRoster:
    """Voter management."""

    def test_create_voter(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        eid = draft_election["id"]
        count = len(list_voters(authenticated_client, eid))

        response = authenticated_client.post(
            f"/elections/{eid}/voters",
            json={"voterId": "voter3", "password": "voter3"},
            headers=csrf_headers
        )

        assert response.status_code == 200
        assert response.json()["voter"]["voter_id"] == "voter3"
        assert len(list_voters(authenticated_client, eid)) == count + 1

    def test_listing_hides_password(self, authenticated_client: TestClient, draft_election: dict):
        voters = list_voters(authenticated_client, draft_election["id"])

        assert [v["voter_id"] for v in voters] == ["voter1", "voter2"]
        for voter in voters:
            assert "password" not in voter
            assert "password_hash" not in voter

    def test_duplicate_voter_id_conflicts(
        self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict
    ):
        response = authenticated_client.post(
            f"/elections/{draft_election['id']}/voters",
            json={"voterId": "voter1", "password": "other"},
            headers=csrf_headers
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    def test_same_voter_id_in_another_election(self, authenticated_client: TestClient, csrf_headers: dict):
        first = authenticated_client.post("/elections", json={"name": "A"}, headers=csrf_headers).json()
        second = authenticated_client.post("/elections", json={"name": "B"}, headers=csrf_headers).json()

        for election in (first, second):
            response = authenticated_client.post(
                f"/elections/{election['election']['id']}/voters",
                json={"voterId": "shared", "password": "secret"},
                headers=csrf_headers
            )
            assert response.status_code == 200

    def test_voter_requires_id_and_password(
        self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict
    ):
        url = f"/elections/{draft_election['id']}/voters"

        assert authenticated_client.post(
            url, json={"voterId": " ", "password": "x"}, headers=csrf_headers
        ).status_code == 400
        assert authenticated_client.post(
            url, json={"voterId": "voter9", "password": ""}, headers=csrf_headers
        ).status_code == 400

    def test_delete_voter(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        eid = draft_election["id"]
        voter_pk = draft_election["voter_ids"][0]

        response = authenticated_client.delete(f"/elections/{eid}/voters/{voter_pk}", headers=csrf_headers)

        assert response.status_code == 200
        assert [v["id"] for v in list_voters(authenticated_client, eid)] == draft_election["voter_ids"][1:]

    def test_delete_unknown_voter(self, authenticated_client: TestClient, csrf_headers: dict, draft_election: dict):
        response = authenticated_client.delete(
            f"/elections/{draft_election['id']}/voters/9999", headers=csrf_headers
        )

        assert response.status_code == 404


class TestRosterLockedAfterLaunch:
    """The roster is fixed once the election is launched."""

    def test_add_voter_after_launch(
        self, authenticated_client: TestClient, csrf_headers: dict, launched_election: dict
    ):
        response = authenticated_client.post(
            f"/elections/{launched_election['id']}/voters",
            json={"voterId": "late", "password": "late"},
            headers=csrf_headers
        )

        assert response.status_code == 423

    def test_delete_voter_after_launch(
        self, authenticated_client: TestClient, csrf_headers: dict, launched_election: dict
    ):
        eid = launched_election["id"]

        response = authenticated_client.delete(
            f"/elections/{eid}/voters/{launched_election['voter_ids'][0]}", headers=csrf_headers
        )

        assert response.status_code == 423
        assert len(list_voters(authenticated_client, eid)) == 2
