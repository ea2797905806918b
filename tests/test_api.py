"""
HTTP tests for team members, tasks, work logs and analytics.

Demo data after startup: admin (1, QA Manager, no profile), Sarah Wilson
(2, Team Lead), Mike Johnson (3, Regular Employee), John Doe (4) and Jane
Smith (5) whose logins were created by reconciliation. Task 1 is assigned to
John, task 2 to Mike.
"""

import asyncio
import json
from pathlib import Path

import pytest

from conftest import auth_headers, login
from qadash.services.reconciliation import reconcile


def read_collection(settings, name):
    return json.loads((Path(settings.data_dir) / f"{name}.json").read_text())


NEW_TASK = {
    "title": "Smoke test release",
    "description": "Run the smoke suite",
    "assignedTo": 3,
    "priority": "high",
    "dueDate": "2025-01-10",
}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "qadash-api"}


# =============================================================================
# Team members
# =============================================================================


class TestTeamMembers:
    def test_everyone_sees_every_profile(self, client, analyst_headers):
        response = client.get("/api/team-members", headers=analyst_headers)
        assert response.status_code == 200
        assert [m["id"] for m in response.json()] == [2, 3, 4, 5]

    def test_requires_session(self, client):
        assert client.get("/api/team-members").status_code == 401

    def test_employee_cannot_add_members(self, client, analyst_headers):
        response = client.post(
            "/api/team-members",
            json={"name": "New Hire", "email": "new@company.com", "role": "QA Analyst"},
            headers=analyst_headers,
        )
        assert response.status_code == 403

    def test_add_member_creates_login(self, client, app, settings, lead_headers):
        response = client.post(
            "/api/team-members",
            json={"name": "New Hire", "email": "New@Company.com", "role": "QA Lead", "phone": "555-0101"},
            headers=lead_headers,
        )
        assert response.status_code == 200
        member = response.json()
        assert member["id"] == 6
        assert member["email"] == "new@company.com"
        assert member["teamId"] == 1
        assert member["availability"] == "available"

        users = {u["id"]: u for u in read_collection(settings, "users")}
        assert users[6]["email"] == "new@company.com"
        assert users[6]["position"] == "Team Lead"
        assert users[6]["needsPasswordReset"] is True

        body = login(client, "new@company.com", "hello123")
        assert body["user"]["needsPasswordReset"] is True
        assert body["user"]["id"] == 6

        report = asyncio.run(reconcile(app.state.services.storage.records, settings))
        assert not report.changed

    def test_duplicate_email(self, client, admin_headers):
        response = client.post(
            "/api/team-members",
            json={"name": "Copy", "email": "JANE.SMITH@company.com"},
            headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json() == {"error": "User with this email already exists"}

    def test_missing_fields(self, client, admin_headers):
        response = client.post("/api/team-members", json={"email": "x@y.com"}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: name"}

    def test_employee_edits_own_profile(self, client, analyst_headers):
        response = client.put(
            "/api/team-members/3",
            json={"email": "mike@elsewhere.com", "phone": "555-0199", "availability": "busy"},
            headers=analyst_headers,
        )
        assert response.status_code == 200
        member = response.json()
        assert member["email"] == "analyst@qa-team.com"
        assert member["phone"] == "555-0199"
        assert member["availability"] == "busy"

    def test_employee_cannot_edit_others(self, client, analyst_headers):
        response = client.put("/api/team-members/4", json={"phone": "1"}, headers=analyst_headers)
        assert response.status_code == 403

    def test_admin_edit_is_mirrored_to_user(self, client, settings, admin_headers):
        response = client.put(
            "/api/team-members/3",
            json={"name": "Michael Johnson", "role": "QA Lead", "department": "Mobile"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["department"] == "Mobile"

        users = {u["id"]: u for u in read_collection(settings, "users")}
        assert users[3]["name"] == "Michael Johnson"
        assert users[3]["role"] == "QA Lead"

    def test_admin_cannot_take_another_email(self, client, admin_headers):
        response = client.put(
            "/api/team-members/3",
            json={"email": "lead@qa-team.com"},
            headers=admin_headers,
        )
        assert response.status_code == 409

    def test_unknown_member(self, client, admin_headers):
        response = client.put("/api/team-members/99", json={"phone": "1"}, headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Team member not found"}


# =============================================================================
# Admin registration
# =============================================================================


REGISTRATION = {
    "email": "tester@company.com",
    "password": "tester123",
    "name": "Tess Ter",
    "role": "QA Analyst",
    "position": "Employee",
    "phone": "555-0110",
    "emergencyContact": "Sam Ter",
    "employeeId": "EMP-100",
    "joinDate": "2025-01-02",
    "department": "Web",
    "employmentType": "Full-time",
}


class TestRegisterEmployee:
    def test_register(self, client, settings, lead_headers):
        response = client.post("/api/admin/register-employee", json=REGISTRATION, headers=lead_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["employee"]["position"] == "Employee"
        assert body["employee"]["employeeId"] == "EMP-100"

        new_id = body["employee"]["id"]
        users = {u["id"]: u for u in read_collection(settings, "users")}
        members = {m["id"]: m for m in read_collection(settings, "team-members")}
        assert users[new_id]["position"] == "Regular Employee"
        assert members[new_id]["employeeId"] == "EMP-100"
        assert members[new_id]["teamId"] == 1

        session = login(client, "tester@company.com", "tester123")
        assert session["user"]["needsPasswordReset"] is True

    def test_register_admin_keeps_manager_title(self, client, settings, admin_headers):
        payload = {**REGISTRATION, "position": "Admin", "role": "QA Manager"}
        response = client.post("/api/admin/register-employee", json=payload, headers=admin_headers)
        assert response.status_code == 200

        new_id = response.json()["employee"]["id"]
        users = {u["id"]: u for u in read_collection(settings, "users")}
        assert users[new_id]["position"] == "QA Manager"

    def test_employee_cannot_register(self, client, analyst_headers):
        response = client.post("/api/admin/register-employee", json=REGISTRATION, headers=analyst_headers)
        assert response.status_code == 403

    def test_missing_fields(self, client, admin_headers):
        payload = {k: v for k, v in REGISTRATION.items() if k not in ("phone", "employeeId")}
        response = client.post("/api/admin/register-employee", json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing required fields: phone, employeeId"}

    def test_short_password(self, client, admin_headers):
        payload = {**REGISTRATION, "password": "abc"}
        response = client.post("/api/admin/register-employee", json=payload, headers=admin_headers)
        assert response.status_code == 400

    def test_invalid_position(self, client, admin_headers):
        payload = {**REGISTRATION, "position": "Team Lead"}
        response = client.post("/api/admin/register-employee", json=payload, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid position selected"}

    def test_duplicates(self, client, admin_headers):
        first = client.post("/api/admin/register-employee", json=REGISTRATION, headers=admin_headers)
        assert first.status_code == 200

        same_id = {**REGISTRATION, "email": "other@company.com"}
        response = client.post("/api/admin/register-employee", json=same_id, headers=admin_headers)
        assert response.status_code == 409
        assert response.json() == {"error": "Employee ID already exists"}

        same_email = {**REGISTRATION, "employeeId": "EMP-200"}
        response = client.post("/api/admin/register-employee", json=same_email, headers=admin_headers)
        assert response.status_code == 409


# =============================================================================
# Tasks
# =============================================================================


class TestTasks:
    def test_visibility(self, client, admin_headers, analyst_headers):
        for assignee in (3, 4, 4):
            response = client.post("/api/tasks", json={**NEW_TASK, "assignedTo": assignee}, headers=admin_headers)
            assert response.status_code == 200

        mine = client.get("/api/tasks", headers=analyst_headers).json()
        everything = client.get("/api/tasks", headers=admin_headers).json()

        assert len(everything) == 5
        assert len(mine) == 2
        assert all(t["assignedTo"] == 3 for t in mine)

    def test_create(self, client, admin_headers):
        response = client.post("/api/tasks", json={**NEW_TASK, "status": "completed"}, headers=admin_headers)
        assert response.status_code == 200
        task = response.json()
        assert task["id"] == 3
        assert task["status"] == "pending"
        assert task["createdBy"] == 1
        assert task["createdDate"]

    def test_employee_cannot_create(self, client, analyst_headers):
        response = client.post("/api/tasks", json=NEW_TASK, headers=analyst_headers)
        assert response.status_code == 403

    def test_required_fields(self, client, admin_headers):
        cases = [
            ("title", "Task title is required"),
            ("assignedTo", "Assignee is required"),
            ("priority", "Priority is required"),
            ("dueDate", "Due date is required"),
        ]
        for field, message in cases:
            payload = {k: v for k, v in NEW_TASK.items() if k != field}
            response = client.post("/api/tasks", json=payload, headers=admin_headers)
            assert response.status_code == 400
            assert response.json() == {"error": message}

    def test_unknown_assignee(self, client, admin_headers):
        response = client.post("/api/tasks", json={**NEW_TASK, "assignedTo": 99}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Assigned team member not found"}

    def test_malformed_body(self, client, admin_headers):
        response = client.post("/api/tasks", json={**NEW_TASK, "priority": "urgent"}, headers=admin_headers)
        assert response.status_code == 400
        assert "error" in response.json()

    def test_assignee_only_changes_status(self, client, analyst_headers):
        response = client.put(
            "/api/tasks/2",
            json={"status": "completed", "priority": "high", "title": "x"},
            headers=analyst_headers,
        )
        assert response.status_code == 200
        task = response.json()
        assert task["status"] == "completed"
        assert task["priority"] == "medium"
        assert task["title"] == "UI Regression Testing"

    def test_employee_cannot_edit_other_tasks(self, client, analyst_headers):
        response = client.put("/api/tasks/1", json={"status": "completed"}, headers=analyst_headers)
        assert response.status_code == 403

    def test_admin_edits_any_field(self, client, admin_headers):
        response = client.put(
            "/api/tasks/1",
            json={"title": "Test SSO login", "priority": "low", "assignedTo": 5, "createdBy": 3},
            headers=admin_headers,
        )
        assert response.status_code == 200
        task = response.json()
        assert task["title"] == "Test SSO login"
        assert task["assignedTo"] == 5
        assert task["createdBy"] == 1

    def test_unknown_task(self, client, admin_headers):
        response = client.put("/api/tasks/99", json={"status": "completed"}, headers=admin_headers)
        assert response.status_code == 404

    def test_assignee_cannot_be_cleared(self, client, admin_headers):
        response = client.put("/api/tasks/1", json={"assignedTo": None}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Assignee is required"}

        task = client.get("/api/tasks", headers=admin_headers).json()[0]
        assert task["assignedTo"] == 4


# =============================================================================
# Work logs
# =============================================================================


class TestWorkLogs:
    def test_log_own_hours(self, client, analyst_headers):
        response = client.post(
            "/api/work-logs",
            json={"memberId": 3, "hours": 2.5, "activity": "Regression", "category": "testing"},
            headers=analyst_headers,
        )
        assert response.status_code == 200
        log = response.json()
        assert log["loggedBy"] == 3
        assert log["hours"] == 2.5
        assert log["date"]
        assert log["timestamp"].endswith("Z")

        listed = client.get("/api/work-logs", headers=analyst_headers).json()
        assert [entry["memberName"] for entry in listed] == ["Mike Johnson"]

    def test_employee_cannot_log_for_others(self, client, analyst_headers, admin_headers):
        payload = {"memberId": 4, "hours": 1}

        denied = client.post("/api/work-logs", json=payload, headers=analyst_headers)
        assert denied.status_code == 403
        assert denied.json() == {"error": "You can only log work hours for yourself"}

        allowed = client.post("/api/work-logs", json=payload, headers=admin_headers)
        assert allowed.status_code == 200
        assert allowed.json()["loggedBy"] == 1
        assert allowed.json()["memberId"] == 4

    def test_admin_needs_existing_target(self, client, admin_headers):
        response = client.post("/api/work-logs", json={"memberId": 99, "hours": 1}, headers=admin_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "Target user not found"}

    def test_validation(self, client, analyst_headers):
        no_member = client.post("/api/work-logs", json={"hours": 1}, headers=analyst_headers)
        assert no_member.status_code == 400

        no_hours = client.post("/api/work-logs", json={"memberId": 3, "hours": 0}, headers=analyst_headers)
        assert no_hours.status_code == 400

    @pytest.mark.parametrize("hours", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_hours_are_rejected(self, client, analyst_headers, admin_headers, hours):
        response = client.post(
            "/api/work-logs",
            content=f'{{"memberId": 3, "hours": {hours}}}',
            headers={**analyst_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400

        listed = client.get("/api/work-logs", headers=analyst_headers)
        assert listed.status_code == 200
        assert listed.json() == []
        assert client.get("/api/analytics", headers=admin_headers).status_code == 200

    def test_visibility(self, client, analyst_headers, admin_headers):
        client.post("/api/work-logs", json={"memberId": 3, "hours": 1}, headers=analyst_headers)
        client.post("/api/work-logs", json={"memberId": 4, "hours": 2}, headers=admin_headers)

        mine = client.get("/api/work-logs", headers=analyst_headers).json()
        everything = client.get("/api/work-logs", headers=admin_headers).json()

        assert [log["memberId"] for log in mine] == [3]
        assert [log["memberName"] for log in everything] == ["Mike Johnson", "John Doe"]


# =============================================================================
# Analytics
# =============================================================================


class TestAnalytics:
    def test_employee_view(self, client, analyst_headers):
        client.post("/api/work-logs", json={"memberId": 3, "hours": 3}, headers=analyst_headers)

        data = client.get("/api/analytics", headers=analyst_headers).json()

        # Team counts always cover everyone
        assert data["totalTeamMembers"] == 4
        assert data["availableMembers"] == 3
        assert data["totalTasks"] == 1
        assert data["completedTasks"] == 0
        assert data["totalHoursLogged"] == 3
        assert data["userPosition"] == "Employee"
        assert data["userPermissions"] == {
            "canManageTeam": False,
            "canAssignTasks": False,
            "canViewAllData": False,
        }

    def test_admin_view(self, client, admin_headers, analyst_headers):
        for hours in (1, 2, 3, 4, 5, 6):
            client.post("/api/work-logs", json={"memberId": 3, "hours": hours}, headers=analyst_headers)

        data = client.get("/api/analytics", headers=admin_headers).json()

        assert data["totalTasks"] == 2
        assert data["totalHoursLogged"] == 21
        assert data["userPosition"] == "Admin"
        assert all(data["userPermissions"].values())
        assert [a["hours"] for a in data["recentActivity"]] == [6, 5, 4, 3, 2]
        assert data["recentActivity"][0]["memberName"] == "Mike Johnson"


# =============================================================================
# Data files
# =============================================================================


class TestDataFiles:
    def test_collections_are_camel_case_arrays(self, client, settings, admin_headers):
        client.post("/api/tasks", json=NEW_TASK, headers=admin_headers)

        for name in ("users", "team-members", "tasks", "work-logs"):
            assert isinstance(read_collection(settings, name), list)

        task = read_collection(settings, "tasks")[-1]
        assert {"assignedTo", "createdBy", "createdDate", "dueDate"} <= set(task)
        assert "assigned_to" not in task

        user = read_collection(settings, "users")[0]
        assert "needsPasswordReset" in user
        assert "isActive" in user

    def test_tokens_are_bearer_only(self, client):
        token = login(client, "analyst@qa-team.com", "analyst123")["token"]
        response = client.get("/api/tasks", headers={"Authorization": f"Token {token}"})
        assert response.status_code == 401
        assert client.get("/api/tasks", headers=auth_headers(token)).status_code == 200
