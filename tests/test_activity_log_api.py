"""Tests for the activity log endpoints and the records mutations leave behind."""
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.models.activity_log import ActivityLog
from app.models.budget_item import BudgetItem
from app.models.task import Task


def _project_log(db_session, project_id):
    db_session.expire_all()
    return db_session.query(ActivityLog).filter(
        ActivityLog.project_id == project_id
    ).order_by(ActivityLog.log_id).all()


class TestProjectActivityFeed:
    """Test GET /projects/{project_id}/activity-log."""

    def test_empty_feed(self, client, auth_headers, sample_project):
        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["logs"] == []
        assert data["total"] == 0
        assert data["limit"] == 50
        assert data["offset"] == 0

    def test_feed_contents(self, client, auth_headers, db_session, sample_project, test_user):
        db_session.add(ActivityLog(
            project_id=sample_project.project_id,
            entity_type="task",
            entity_id=42,
            action="created",
            performed_by=test_user.user_id,
            performed_at=datetime(2025, 3, 3, 10, 0),
            extra={"name": "Write report"},
        ))
        db_session.commit()

        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log", headers=auth_headers)
        assert response.status_code == 200
        log = response.json()["logs"][0]
        assert log["entity_type"] == "task"
        assert log["entity_id"] == 42
        assert log["action"] == "created"
        assert log["performed_by"] == test_user.user_id
        assert log["performer_name"] == "Test User"
        assert log["metadata"] == {"name": "Write report"}

    def test_system_performer_label(self, client, auth_headers, db_session, sample_project):
        db_session.add(ActivityLog(
            project_id=sample_project.project_id,
            entity_type="project",
            entity_id=sample_project.project_id,
            action="updated",
            field_name="color",
            old_value="#3b82f6",
            new_value="#ef4444",
        ))
        db_session.commit()

        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log", headers=auth_headers)
        log = response.json()["logs"][0]
        assert log["performed_by"] is None
        assert log["performer_name"] == "System"
        assert log["old_value"] == "#3b82f6"
        assert log["new_value"] == "#ef4444"

    def test_pagination(self, client, auth_headers, db_session, sample_project):
        base = datetime(2025, 3, 1, 9, 0)
        for i in range(5):
            db_session.add(ActivityLog(
                project_id=sample_project.project_id,
                entity_type="task",
                entity_id=i,
                action="created",
                performed_at=base + timedelta(minutes=i),
            ))
        db_session.commit()

        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log?limit=2&offset=1",
            headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert data["limit"] == 2
        assert data["offset"] == 1
        assert [log["entity_id"] for log in data["logs"]] == [3, 2]

    def test_filter_by_entity_type(self, client, auth_headers, db_session, sample_project):
        for entity_type in ("task", "milestone", "task"):
            db_session.add(ActivityLog(
                project_id=sample_project.project_id,
                entity_type=entity_type,
                entity_id=1,
                action="created",
            ))
        db_session.commit()

        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log?entity_type=milestone",
            headers=auth_headers)
        data = response.json()
        assert data["total"] == 1
        assert data["logs"][0]["entity_type"] == "milestone"

    def test_invalid_entity_type(self, client, auth_headers, sample_project):
        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log?entity_type=invoice",
            headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.parametrize("query", ["limit=0", "limit=201", "offset=-1"])
    def test_invalid_paging(self, client, auth_headers, sample_project, query):
        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log?{query}", headers=auth_headers)
        assert response.status_code == 422

    def test_requires_auth(self, client, sample_project):
        response = client.get(f"/projects/{sample_project.project_id}/activity-log")
        assert response.status_code == 401

    def test_non_member_forbidden(self, client, second_headers, sample_project):
        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log", headers=second_headers)
        assert response.status_code == 403

    def test_member_can_read(self, client, member_headers, sample_project):
        response = client.get(
            f"/projects/{sample_project.project_id}/activity-log", headers=member_headers)
        assert response.status_code == 200

    def test_admin_unknown_project_is_empty(self, client, admin_headers):
        response = client.get("/projects/9999/activity-log", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["total"] == 0


class TestEntityHistory:
    """Test GET /activity-log/entities/{entity_type}/{entity_id}."""

    def test_history(self, client, auth_headers, db_session, sample_project):
        base = datetime(2025, 3, 1, 9, 0)
        db_session.add_all([
            ActivityLog(project_id=sample_project.project_id, entity_type="task", entity_id=5,
                        action="created", performed_at=base),
            ActivityLog(project_id=sample_project.project_id, entity_type="task", entity_id=5,
                        action="status_changed", field_name="status", old_value="todo",
                        new_value="review", performed_at=base + timedelta(hours=1)),
            ActivityLog(project_id=sample_project.project_id, entity_type="task", entity_id=6,
                        action="created", performed_at=base),
        ])
        db_session.commit()

        response = client.get("/activity-log/entities/task/5", headers=auth_headers)
        assert response.status_code == 200
        logs = response.json()
        assert [log["action"] for log in logs] == ["status_changed", "created"]

    def test_hides_inaccessible_projects(self, client, second_headers, db_session, sample_project):
        db_session.add(ActivityLog(
            project_id=sample_project.project_id, entity_type="task", entity_id=5, action="created"))
        db_session.commit()

        response = client.get("/activity-log/entities/task/5", headers=second_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_admin_sees_deleted_project_history(self, client, admin_headers, db_session):
        db_session.add(ActivityLog(project_id=555, entity_type="project", entity_id=555, action="deleted"))
        db_session.commit()

        response = client.get("/activity-log/entities/project/555", headers=admin_headers)
        assert len(response.json()) == 1

    def test_invalid_entity_type(self, client, auth_headers):
        response = client.get("/activity-log/entities/invoice/1", headers=auth_headers)
        assert response.status_code == 422


class TestVocabulary:

    def test_entity_types(self, client, auth_headers):
        response = client.get("/activity-log/entity-types", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == [
            "project", "task", "milestone", "member", "stakeholder", "budget_item", "file"
        ]

    def test_actions(self, client, auth_headers):
        response = client.get("/activity-log/actions", headers=auth_headers)
        assert response.json() == ["created", "updated", "deleted", "status_changed"]


class TestMutationsAreRecorded:
    """Mutating endpoints leave records in the same transaction."""

    def test_task_lifecycle(self, client, auth_headers, db_session, sample_project, test_user):
        pid = sample_project.project_id
        response = client.post(
            f"/projects/{pid}/tasks", json={"name": "Draft charter"}, headers=auth_headers)
        assert response.status_code == 201
        task_id = response.json()["task_id"]

        response = client.patch(
            f"/projects/{pid}/tasks/{task_id}/status",
            json={"status": "in_progress"}, headers=auth_headers)
        assert response.status_code == 200

        response = client.delete(f"/projects/{pid}/tasks/{task_id}", headers=auth_headers)
        assert response.status_code == 204

        logs = _project_log(db_session, pid)
        assert [(log.action, log.entity_id) for log in logs] == [
            ("created", task_id),
            ("status_changed", task_id),
            ("deleted", task_id),
        ]
        assert logs[0].extra == {"name": "Draft charter"}
        assert logs[1].old_value == "todo"
        assert logs[1].new_value == "in_progress"
        assert logs[1].extra == {"old_status": "todo", "new_status": "in_progress"}
        assert all(log.performed_by == test_user.user_id for log in logs)

    def test_update_records_only_changed_fields(self, client, auth_headers, db_session, sample_project):
        pid = sample_project.project_id
        response = client.patch(
            f"/projects/{pid}",
            json={"name": "Data Platform Migration", "priority": "critical", "status": "on_hold"},
            headers=auth_headers)
        assert response.status_code == 200

        logs = _project_log(db_session, pid)
        assert [(log.action, log.field_name) for log in logs] == [
            ("updated", "priority"),
            ("status_changed", "status"),
        ]
        assert logs[0].old_value == "high"
        assert logs[0].new_value == "critical"
        assert logs[1].old_value == "active"
        assert logs[1].new_value == "on_hold"

    def test_noop_update_records_nothing(self, client, auth_headers, db_session, sample_project):
        pid = sample_project.project_id
        response = client.patch(
            f"/projects/{pid}", json={"status": "active", "priority": "high"}, headers=auth_headers)
        assert response.status_code == 200
        assert _project_log(db_session, pid) == []

    def test_failed_audit_rolls_back_mutation(self, client, auth_headers, db_session,
                                              sample_project, monkeypatch):
        def failing_record_event(*args, **kwargs):
            raise SQLAlchemyError("audit insert failed")

        monkeypatch.setattr("app.api.budget_items.record_event", failing_record_event)

        with pytest.raises(SQLAlchemyError):
            client.post(
                f"/projects/{sample_project.project_id}/budget-items",
                json={"category": "licenses", "name": "BI seats", "estimated_cost": 1200},
                headers=auth_headers)

        db_session.expire_all()
        assert db_session.query(BudgetItem).count() == 0
        assert db_session.query(ActivityLog).count() == 0

    def test_project_history_survives_deletion(self, client, auth_headers, admin_headers,
                                               db_session, sample_project):
        pid = sample_project.project_id
        response = client.delete(f"/projects/{pid}", headers=auth_headers)
        assert response.status_code == 204

        response = client.get(f"/projects/{pid}/activity-log", headers=admin_headers)
        assert response.status_code == 200
        logs = response.json()["logs"]
        assert logs[0]["action"] == "deleted"
        assert logs[0]["metadata"] == {"name": "Data Platform Migration"}

    def test_invalid_task_status_rejected_without_records(self, client, auth_headers, db_session,
                                                          sample_project):
        task = Task(project_id=sample_project.project_id, name="Review", status="todo")
        db_session.add(task)
        db_session.commit()

        response = client.patch(
            f"/projects/{sample_project.project_id}/tasks/{task.task_id}/status",
            json={"status": "blocked"}, headers=auth_headers)
        assert response.status_code == 422
        assert _project_log(db_session, sample_project.project_id) == []
