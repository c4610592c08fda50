"""Tests for stakeholder endpoints."""
import pytest

from app.models.activity_log import ActivityLog


class TestStakeholders:
    """Test /projects/{project_id}/stakeholders endpoints."""

    def test_internal_stakeholder(self, client, auth_headers, db_session, sample_project, second_user):
        response = client.post(
            f"/projects/{sample_project.project_id}/stakeholders",
            json={"user_id": second_user.user_id, "role": "sponsor", "is_primary": True},
            headers=auth_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["full_name"] == "Second User"
        assert data["is_primary"] is True

        log = db_session.query(ActivityLog).one()
        assert log.entity_type == "stakeholder"
        assert log.extra == {"role": "sponsor"}

    def test_external_stakeholder(self, client, auth_headers, sample_project):
        response = client.post(
            f"/projects/{sample_project.project_id}/stakeholders",
            json={
                "external_name": "Dana Reyes",
                "external_email": "dana@vendor.example.com",
                "external_organization": "Vendor Co",
                "role": "subject_matter_expert",
            },
            headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["user"] is None

    def test_requires_user_or_name(self, client, auth_headers, sample_project):
        response = client.post(
            f"/projects/{sample_project.project_id}/stakeholders",
            json={"role": "sponsor"}, headers=auth_headers)
        assert response.status_code == 422

    def test_unknown_user(self, client, auth_headers, sample_project):
        response = client.post(
            f"/projects/{sample_project.project_id}/stakeholders",
            json={"user_id": 9999, "role": "sponsor"}, headers=auth_headers)
        assert response.status_code == 400

    def test_primary_listed_first(self, client, auth_headers, sample_project):
        url = f"/projects/{sample_project.project_id}/stakeholders"
        client.post(url, json={"external_name": "A", "role": "steering_committee"}, headers=auth_headers)
        client.post(url, json={"external_name": "B", "role": "sponsor", "is_primary": True},
                    headers=auth_headers)

        response = client.get(url, headers=auth_headers)
        assert [s["external_name"] for s in response.json()] == ["B", "A"]

    def test_update_and_delete(self, client, auth_headers, db_session, sample_project):
        url = f"/projects/{sample_project.project_id}/stakeholders"
        stakeholder_id = client.post(
            url, json={"external_name": "A", "role": "business_owner"}, headers=auth_headers
        ).json()["stakeholder_id"]

        response = client.patch(
            f"{url}/{stakeholder_id}", json={"is_primary": True}, headers=auth_headers)
        assert response.status_code == 200

        update = db_session.query(ActivityLog).filter(ActivityLog.action == "updated").one()
        assert update.field_name == "is_primary"
        assert update.old_value == "false"
        assert update.new_value == "true"

        response = client.delete(f"{url}/{stakeholder_id}", headers=auth_headers)
        assert response.status_code == 204
        deleted = db_session.query(ActivityLog).filter(ActivityLog.action == "deleted").one()
        assert deleted.extra == {"role": "business_owner"}

    @pytest.mark.parametrize("field", ["role", "is_primary"])
    def test_update_rejects_null_required_field(self, client, auth_headers, db_session,
                                                sample_project, field):
        url = f"/projects/{sample_project.project_id}/stakeholders"
        stakeholder_id = client.post(
            url, json={"external_name": "A", "role": "business_owner"}, headers=auth_headers
        ).json()["stakeholder_id"]

        response = client.patch(f"{url}/{stakeholder_id}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422
        assert db_session.query(ActivityLog).filter(ActivityLog.action == "updated").count() == 0
