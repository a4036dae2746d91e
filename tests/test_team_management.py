from app.models.base import utcnow
from app.models.role import TeamRole
from tests.conftest import create_test_token, headers_for, make_user


class TestListUserTeams:
    """Tests for GET /api/teams (list all user's teams)"""

    def test_list_user_teams_with_role(self, client, team, viewer_headers):
        response = client.get("/api/teams", headers=viewer_headers)

        assert response.status_code == 200
        teams = response.json()
        assert len(teams) == 1
        assert teams[0]["id"] == team.id
        assert teams[0]["name"] == "Household"
        assert teams[0]["role"] == TeamRole.VIEWER
        assert "created_at" in teams[0]

    def test_deleted_teams_not_listed(self, client, db_session, team, admin_headers):
        team.deleted_at = utcnow()
        db_session.commit()

        response = client.get("/api/teams", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_user_without_teams_gets_empty_list(self, client, outsider_headers):
        response = client.get("/api/teams", headers=outsider_headers)
        assert response.status_code == 200
        assert response.json() == []


class TestCreateTeam:
    def test_creator_becomes_admin(self, client, auth_headers):
        response = client.post("/api/teams", headers=auth_headers, json={"name": "  Flatmates "})

        assert response.status_code == 201
        created = response.json()
        assert created["name"] == "Flatmates"
        assert created["deleted_at"] is None

        teams = client.get("/api/teams", headers=auth_headers).json()
        assert teams[0]["role"] == TeamRole.ADMIN

    def test_blank_name_rejected(self, client, auth_headers):
        response = client.post("/api/teams", headers=auth_headers, json={"name": "   "})
        assert response.status_code == 422


class TestGetAndRenameTeam:
    def test_member_gets_detail_with_book_counts(self, client, db_session, team, book, viewer_headers):
        from app.models.book import Book

        db_session.add(Book(team_id=team.id, name="Archive", deleted_at=utcnow()))
        db_session.commit()

        response = client.get(f"/api/teams/{team.id}", headers=viewer_headers)

        assert response.status_code == 200
        detail = response.json()
        assert detail["book_count"] == 1
        assert detail["deleted_book_count"] == 1

    def test_outsider_forbidden(self, client, team, outsider_headers):
        response = client.get(f"/api/teams/{team.id}", headers=outsider_headers)
        assert response.status_code == 403

    def test_missing_team_not_found(self, client, auth_headers):
        response = client.get("/api/teams/9999", headers=auth_headers)
        assert response.status_code == 404

    def test_admin_renames(self, client, team, admin_headers):
        response = client.put(f"/api/teams/{team.id}", headers=admin_headers, json={"name": "Home"})
        assert response.status_code == 200
        assert response.json()["name"] == "Home"

    def test_collaborator_cannot_rename(self, client, team, collaborator_headers):
        response = client.put(f"/api/teams/{team.id}", headers=collaborator_headers, json={"name": "Mine"})
        assert response.status_code == 403
        assert response.json()["detail"] == "insufficient privilege"


class TestTeamLifecycle:
    def test_soft_delete_restore_permanent(self, client, team, book, admin_headers):
        assert client.delete(f"/api/teams/{team.id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/teams/{team.id}", headers=admin_headers).status_code == 404
        assert client.get(f"/api/books/{book.id}", headers=admin_headers).status_code == 404

        restored = client.post(f"/api/teams/{team.id}/restore", headers=admin_headers)
        assert restored.status_code == 200
        assert restored.json()["deleted_at"] is None
        assert client.get(f"/api/books/{book.id}", headers=admin_headers).status_code == 200

        assert client.delete(f"/api/teams/{team.id}", headers=admin_headers).status_code == 204
        response = client.delete(f"/api/teams/{team.id}/permanent", headers=admin_headers)
        assert response.status_code == 204
        assert client.post(f"/api/teams/{team.id}/restore", headers=admin_headers).status_code == 404

    def test_permanent_delete_of_active_team_rejected(self, client, team, admin_headers):
        response = client.delete(f"/api/teams/{team.id}/permanent", headers=admin_headers)
        assert response.status_code == 400

    def test_viewer_cannot_delete(self, client, team, viewer_headers):
        assert client.delete(f"/api/teams/{team.id}", headers=viewer_headers).status_code == 403


class TestTeamMembers:
    def test_list_members(self, client, team, viewer_headers):
        response = client.get(f"/api/teams/{team.id}/users", headers=viewer_headers)

        assert response.status_code == 200
        members = {m["username"]: m["role"] for m in response.json()}
        assert members == {
            "alice": TeamRole.ADMIN,
            "bob": TeamRole.COLLABORATOR,
            "carol": TeamRole.VIEWER,
        }

    def test_admin_adds_member(self, client, team, outsider_user, admin_headers, outsider_headers):
        response = client.post(
            f"/api/teams/{team.id}/users",
            headers=admin_headers,
            json={"user_id": outsider_user.id, "role": "viewer"},
        )

        assert response.status_code == 201
        assert any(m["user_id"] == outsider_user.id for m in response.json())
        assert client.get(f"/api/teams/{team.id}", headers=outsider_headers).status_code == 200

    def test_adding_existing_member_rejected(self, client, team, viewer_user, admin_headers):
        response = client.post(
            f"/api/teams/{team.id}/users",
            headers=admin_headers,
            json={"user_id": viewer_user.id, "role": "admin"},
        )
        assert response.status_code == 400

    def test_adding_unknown_user_not_found(self, client, team, admin_headers):
        response = client.post(
            f"/api/teams/{team.id}/users", headers=admin_headers, json={"user_id": 555, "role": "viewer"}
        )
        assert response.status_code == 404

    def test_invalid_role_rejected(self, client, team, outsider_user, admin_headers):
        response = client.post(
            f"/api/teams/{team.id}/users",
            headers=admin_headers,
            json={"user_id": outsider_user.id, "role": "owner"},
        )
        assert response.status_code == 422

    def test_change_role(self, client, team, viewer_user, admin_headers):
        response = client.put(
            f"/api/teams/{team.id}/users/{viewer_user.id}", headers=admin_headers, json={"role": "collaborator"}
        )
        assert response.status_code == 200
        roles = {m["user_id"]: m["role"] for m in response.json()}
        assert roles[viewer_user.id] == TeamRole.COLLABORATOR

    def test_last_admin_cannot_be_demoted(self, client, team, admin_user, admin_headers):
        response = client.put(
            f"/api/teams/{team.id}/users/{admin_user.id}", headers=admin_headers, json={"role": "viewer"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "last admin"

    def test_last_admin_cannot_be_removed(self, client, team, admin_user, admin_headers):
        response = client.delete(f"/api/teams/{team.id}/users/{admin_user.id}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "last admin"

    def test_remove_member(self, client, team, viewer_user, admin_headers, viewer_headers):
        response = client.delete(f"/api/teams/{team.id}/users/{viewer_user.id}", headers=admin_headers)
        assert response.status_code == 204
        assert client.get(f"/api/teams/{team.id}", headers=viewer_headers).status_code == 403

    def test_non_admin_cannot_remove(self, client, team, viewer_user, collaborator_headers):
        response = client.delete(f"/api/teams/{team.id}/users/{viewer_user.id}", headers=collaborator_headers)
        assert response.status_code == 403

    def test_remove_non_member_not_found(self, client, db_session, team, admin_headers):
        stranger = make_user(db_session, "stranger")
        response = client.delete(f"/api/teams/{team.id}/users/{stranger.id}", headers=admin_headers)
        assert response.status_code == 404

    def test_second_admin_can_step_down(self, client, team, admin_user, collaborator_user, admin_headers):
        client.put(
            f"/api/teams/{team.id}/users/{collaborator_user.id}", headers=admin_headers, json={"role": "admin"}
        )
        response = client.put(
            f"/api/teams/{team.id}/users/{admin_user.id}",
            headers=headers_for(collaborator_user),
            json={"role": "viewer"},
        )
        assert response.status_code == 200

    def test_new_user_token_auto_provisions(self, client, team):
        headers = {"Authorization": f"Bearer {create_test_token(user_id='newcomer')}"}
        response = client.get(f"/api/teams/{team.id}", headers=headers)
        assert response.status_code == 403
