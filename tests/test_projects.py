"""Tests for project and membership endpoints."""
from datetime import date

import pytest

from app.models.activity_log import ActivityLog
from app.models.project import Project, ProjectMember
from app.models.task import Task
from app.models.time_entry import TimeEntry


class TestProjectCRUD:
    """Test /projects endpoints."""

    def test_list_projects_empty(self, client, auth_headers):
        response = client.get("/projects/", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_list_requires_auth(self, client):
        response = client.get("/projects/")
        assert response.status_code == 401

    def test_create_project(self, client, auth_headers, test_user, db_session):
        response = client.post(
            "/projects/",
            json={"name": "CRM Rollout", "priority": "high", "budget": 25000},
            headers=auth_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "CRM Rollout"
        assert data["status"] == "planning"
        assert data["priority"] == "high"
        assert data["budget"] == 25000.0
        assert data["spent"] == 0.0
        assert data["owner_id"] == test_user.user_id
        assert data["owner"]["full_name"] == "Test User"

        log = db_session.query(ActivityLog).filter(
            ActivityLog.project_id == data["project_id"]).one()
        assert log.entity_type == "project"
        assert log.action == "created"
        assert log.extra == {"name": "CRM Rollout"}

    def test_create_with_members(self, client, auth_headers, second_user, db_session):
        response = client.post(
            "/projects/",
            json={"name": "CRM Rollout", "members": [second_user.user_id]},
            headers=auth_headers
        )
        assert response.status_code == 201
        project_id = response.json()["project_id"]

        members = db_session.query(ProjectMember).filter(
            ProjectMember.project_id == project_id).all()
        assert [m.user_id for m in members] == [second_user.user_id]

        member_log = db_session.query(ActivityLog).filter(
            ActivityLog.project_id == project_id,
            ActivityLog.entity_type == "member"
        ).one()
        assert member_log.action == "created"
        assert member_log.entity_id == second_user.user_id
        assert member_log.extra == {"user_name": "Second User", "role": "member"}

    def test_create_with_unknown_member(self, client, auth_headers, db_session):
        response = client.post(
            "/projects/", json={"name": "CRM Rollout", "members": [9999]}, headers=auth_headers)
        assert response.status_code == 404
        assert db_session.query(Project).count() == 0

    def test_create_invalid_status(self, client, auth_headers):
        response = client.post(
            "/projects/", json={"name": "CRM Rollout", "status": "paused"}, headers=auth_headers)
        assert response.status_code == 422

    def test_create_negative_budget(self, client, auth_headers):
        response = client.post(
            "/projects/", json={"name": "CRM Rollout", "budget": -1}, headers=auth_headers)
        assert response.status_code == 422

    def test_get_project(self, client, auth_headers, sample_project):
        response = client.get(f"/projects/{sample_project.project_id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Data Platform Migration"

    def test_get_forbidden_for_outsider(self, client, second_headers, sample_project):
        response = client.get(f"/projects/{sample_project.project_id}", headers=second_headers)
        assert response.status_code == 403

    def test_admin_get_missing_project(self, client, admin_headers):
        response = client.get("/projects/9999", headers=admin_headers)
        assert response.status_code == 404

    def test_update_project(self, client, auth_headers, sample_project):
        response = client.patch(
            f"/projects/{sample_project.project_id}",
            json={"description": "Warehouse cut-over", "end_date": "2025-12-31"},
            headers=auth_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "Warehouse cut-over"
        assert data["end_date"] == "2025-12-31"

    def test_update_unknown_owner(self, client, auth_headers, sample_project):
        response = client.patch(
            f"/projects/{sample_project.project_id}", json={"owner_id": 9999}, headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.parametrize("field", ["name", "status", "priority", "budget", "color"])
    def test_update_rejects_null_required_field(self, client, auth_headers, db_session,
                                                sample_project, field):
        response = client.patch(
            f"/projects/{sample_project.project_id}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422

        db_session.expire_all()
        assert db_session.query(Project).one().name == "Data Platform Migration"
        assert db_session.query(ActivityLog).count() == 0

    def test_update_clears_end_date(self, client, auth_headers, sample_project):
        client.patch(
            f"/projects/{sample_project.project_id}", json={"end_date": "2025-12-31"}, headers=auth_headers)
        response = client.patch(
            f"/projects/{sample_project.project_id}", json={"end_date": None}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["end_date"] is None

    def test_delete_project(self, client, auth_headers, sample_project, db_session):
        response = client.delete(f"/projects/{sample_project.project_id}", headers=auth_headers)
        assert response.status_code == 204

        db_session.expire_all()
        assert db_session.query(Project).count() == 0

    def test_admin_delete_missing_project(self, client, admin_headers):
        response = client.delete("/projects/9999", headers=admin_headers)
        assert response.status_code == 404


class TestProjectVisibility:
    """Owners, members and admins see a project; nobody else does."""

    def test_owner_sees_project(self, client, auth_headers, sample_project):
        response = client.get("/projects/", headers=auth_headers)
        assert [p["project_id"] for p in response.json()] == [sample_project.project_id]

    def test_outsider_sees_nothing(self, client, second_headers, sample_project):
        response = client.get("/projects/", headers=second_headers)
        assert response.json() == []

    def test_member_sees_project(self, client, member_headers, sample_project):
        response = client.get("/projects/", headers=member_headers)
        assert [p["project_id"] for p in response.json()] == [sample_project.project_id]

    def test_admin_sees_everything(self, client, admin_headers, sample_project):
        response = client.get("/projects/", headers=admin_headers)
        assert len(response.json()) == 1


class TestMyProjects:
    """Test /projects/my."""

    def test_owned_and_member_projects_with_counts(self, client, member_headers, db_session,
                                                   sample_project, test_user, project_member):
        own = Project(name="Analyst Workbench", owner_id=project_member.user_id)
        unrelated = Project(name="Somebody Else's", owner_id=test_user.user_id)
        db_session.add_all([own, unrelated])
        db_session.flush()
        db_session.add_all([
            Task(project_id=sample_project.project_id, name="Extract", status="completed"),
            Task(project_id=sample_project.project_id, name="Load", status="todo"),
        ])
        db_session.commit()

        response = client.get("/projects/my", headers=member_headers)
        assert response.status_code == 200
        projects = {p["name"]: p for p in response.json()}
        assert set(projects) == {"Data Platform Migration", "Analyst Workbench"}

        migration = projects["Data Platform Migration"]
        assert migration["member_count"] == 1
        assert migration["task_count"] == 2
        assert migration["completed_tasks"] == 1
        assert projects["Analyst Workbench"]["task_count"] == 0

    def test_admin_gets_only_own_projects(self, client, admin_headers, sample_project):
        response = client.get("/projects/my", headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_requires_auth(self, client):
        assert client.get("/projects/my").status_code == 401


class TestProjectSummary:

    def test_summary(self, client, auth_headers, db_session, sample_project, test_user, second_user):
        db_session.add_all([
            TimeEntry(project_id=sample_project.project_id, user_id=test_user.user_id,
                      entry_date=date(2025, 3, 3), hours=4, billable=True, hourly_rate=100),
            TimeEntry(project_id=sample_project.project_id, user_id=second_user.user_id,
                      entry_date=date(2025, 3, 4), hours=2, billable=False, hourly_rate=80),
        ])
        db_session.commit()

        response = client.get(f"/projects/{sample_project.project_id}/summary", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total_hours"] == 6.0
        assert data["total_cost"] == 400.0
        assert data["contributors"] == 2

    def test_summary_without_entries(self, client, auth_headers, sample_project):
        response = client.get(f"/projects/{sample_project.project_id}/summary", headers=auth_headers)
        data = response.json()
        assert data["total_hours"] == 0
        assert data["total_cost"] == 0
        assert data["contributors"] == 0


class TestMembers:
    """Test /projects/{project_id}/members endpoints."""

    def test_add_member(self, client, auth_headers, sample_project, second_user, db_session):
        response = client.post(
            f"/projects/{sample_project.project_id}/members",
            json={"user_id": second_user.user_id, "role": "analyst"},
            headers=auth_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == second_user.user_id
        assert data["role"] == "analyst"
        assert data["user"]["email"] == "second@example.com"

        log = db_session.query(ActivityLog).filter(ActivityLog.entity_type == "member").one()
        assert log.action == "created"
        assert log.extra == {"user_name": "Second User", "role": "analyst"}

    def test_change_member_role(self, client, auth_headers, sample_project, project_member, db_session):
        response = client.post(
            f"/projects/{sample_project.project_id}/members",
            json={"user_id": project_member.user_id, "role": "lead"},
            headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["role"] == "lead"

        log = db_session.query(ActivityLog).filter(ActivityLog.entity_type == "member").one()
        assert log.action == "updated"
        assert log.field_name == "role"
        assert log.old_value == "member"
        assert log.new_value == "lead"

    def test_add_unknown_user(self, client, auth_headers, sample_project):
        response = client.post(
            f"/projects/{sample_project.project_id}/members",
            json={"user_id": 9999}, headers=auth_headers)
        assert response.status_code == 404

    def test_list_members(self, client, auth_headers, sample_project, project_member):
        response = client.get(f"/projects/{sample_project.project_id}/members", headers=auth_headers)
        assert response.status_code == 200
        assert [m["user_id"] for m in response.json()] == [project_member.user_id]

    def test_remove_member(self, client, auth_headers, sample_project, project_member, db_session):
        response = client.delete(
            f"/projects/{sample_project.project_id}/members/{project_member.user_id}",
            headers=auth_headers)
        assert response.status_code == 204

        db_session.expire_all()
        assert db_session.query(ProjectMember).count() == 0
        log = db_session.query(ActivityLog).filter(ActivityLog.entity_type == "member").one()
        assert log.action == "deleted"
        assert log.extra == {"user_name": "Second User", "role": "member"}

    def test_remove_non_member(self, client, auth_headers, sample_project, second_user):
        response = client.delete(
            f"/projects/{sample_project.project_id}/members/{second_user.user_id}",
            headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Member not found"
