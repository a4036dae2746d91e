"""End-to-end flows across teams, books and their contents."""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from tests.conftest import create_test_token


def _headers(auth_user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_test_token(user_id=auth_user_id)}"}


class TestSharedBudgetWorkflow:
    """Two users sharing a budget through a team"""

    def test_complete_workflow(self, client):
        owner = _headers("olivia")
        partner = _headers("pat")

        # First requests provision the user rows: olivia is user 1, pat is user 2
        assert client.get("/api/teams", headers=owner).status_code == 200
        assert client.get("/api/teams", headers=partner).status_code == 200

        team = client.post("/api/teams", headers=owner, json={"name": "Our Flat"}).json()
        book = client.post(
            "/api/books", headers=owner, json={"team_id": team["id"], "name": "Bills"}
        ).json()

        # Pat cannot see anything until added
        assert client.get(f"/api/books/{book['id']}", headers=partner).status_code == 403

        members = client.get(f"/api/teams/{team['id']}/users", headers=owner).json()
        assert len(members) == 1
        added = client.post(
            f"/api/teams/{team['id']}/users",
            headers=owner,
            json={"user_id": 2, "role": "viewer"},
        ).json()
        assert {m["username"] for m in added} == {"olivia", "pat"}

        account = client.post(
            "/api/accounts", headers=owner, json={"book_id": book["id"], "name": "Joint"}
        ).json()

        # Viewer reads, cannot write
        assert client.get(f"/api/accounts/{account['id']}", headers=partner).status_code == 200
        tx = {"account_id": account["id"], "description": "Power", "amount": "-60.00", "date": "2026-06-01"}
        assert client.post("/api/transactions", headers=partner, json=tx).status_code == 403

        # Promote to collaborator and retry
        client.put(f"/api/teams/{team['id']}/users/2", headers=owner, json={"role": "collaborator"})
        assert client.post("/api/transactions", headers=partner, json=tx).status_code == 201

        # Soft-deleting the team hides the whole tree; restoring brings it back
        assert client.delete(f"/api/teams/{team['id']}", headers=owner).status_code == 204
        listing = client.get(f"/api/transactions?account_id={account['id']}", headers=partner)
        assert listing.status_code == 404
        assert client.post(f"/api/teams/{team['id']}/restore", headers=owner).status_code == 200
        listing = client.get(f"/api/transactions?account_id={account['id']}", headers=partner)
        assert listing.json()["total"] == 1


class TestTeamIsolation:
    def test_users_in_different_teams_cannot_cross_over(self, client):
        a = _headers("user-a")
        b = _headers("user-b")

        team_a = client.post("/api/teams", headers=a, json={"name": "A"}).json()
        team_b = client.post("/api/teams", headers=b, json={"name": "B"}).json()
        book_a = client.post("/api/books", headers=a, json={"team_id": team_a["id"], "name": "A1"}).json()

        assert client.get(f"/api/books/{book_a['id']}", headers=b).status_code == 403
        assert client.get(f"/api/books?team_id={team_a['id']}", headers=b).status_code == 403
        assert client.post(
            "/api/books", headers=a, json={"team_id": team_b["id"], "name": "Intrusion"}
        ).status_code == 403


class TestStorageFailures:
    def test_storage_error_maps_to_500(self, client, db_session, team, admin_headers):
        failure = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(db_session, "get", side_effect=failure):
            response = client.get(f"/api/teams/{team.id}", headers=admin_headers)

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal storage error"}
