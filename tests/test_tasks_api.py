"""
API tests for task detail and POST /api/tasks/{task_id}/time.
"""

import pytest

from taskledger.security import KeyManager


def _log(client, task_id, headers, body):
    return client.post(f"/api/tasks/{task_id}/time", json=body, headers=headers)


class TestTaskDetail:
    def test_assignee_sees_task_with_logs(self, client, auth_headers):
        response = client.get("/api/tasks/tsk_a", headers=auth_headers("usr_u1"))
        assert response.status_code == 200
        task = response.json()

        assert task["id"] == "tsk_a"
        assert task["project"] == {"id": "prj_alpha", "name": "Alpha"}
        assert task["assignee"]["name"] == "Una"
        assert task["actualHours"] == 3.5
        assert [(e["hours"], e["minutes"]) for e in task["timeLogs"]] == [(2, 0), (1, 30)]
        assert task["timeLogs"][1]["effectiveHours"] == 1.5

    def test_dangling_log_user_is_null(self, client, auth_headers):
        task = client.get("/api/tasks/tsk_ghost", headers=auth_headers("usr_admin")).json()
        assert [e["user"] for e in task["timeLogs"][:2]] == [None, None]

    def test_unrelated_user_forbidden(self, client, auth_headers):
        response = client.get("/api/tasks/tsk_a", headers=auth_headers("usr_out"))
        assert response.status_code == 403

    def test_archived_is_not_found(self, client, auth_headers):
        response = client.get("/api/tasks/tsk_arch", headers=auth_headers("usr_admin"))
        assert response.status_code == 404


class TestLogTime:
    def test_success(self, client, auth_headers):
        response = _log(client, "tsk_a", auth_headers("usr_u1"), {"hours": 1, "minutes": 15})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Time logged successfully"
        assert body["task"]["actualHours"] == 4.75
        entry = body["task"]["timeLogs"][-1]
        assert entry["user"]["id"] == "usr_u1"
        assert (entry["hours"], entry["minutes"]) == (1, 15)

    def test_project_manager_may_log(self, client, auth_headers):
        response = _log(client, "tsk_a", auth_headers("usr_u3"), {"minutes": 45})
        assert response.status_code == 200
        assert response.json()["task"]["timeLogs"][-1]["user"]["name"] == "Cleo"

    def test_null_amounts_count_as_zero(self, client, auth_headers):
        response = _log(client, "tsk_a", auth_headers("usr_u1"), {"hours": None, "minutes": 30})
        assert response.status_code == 200
        assert response.json()["task"]["actualHours"] == 4.0

    def test_logged_time_shows_in_timesheet(self, client, auth_headers):
        _log(client, "tsk_b", auth_headers("usr_u2"), {"hours": 2})
        body = client.get(
            "/api/timesheet", params={"userId": "usr_u2"}, headers=auth_headers("usr_admin")
        ).json()
        assert body["timesheetData"][0]["totalHours"] == 4.0

    @pytest.mark.parametrize("body", [{}, {"hours": 0, "minutes": 0}, None])
    def test_zero_amount_rejected(self, client, auth_headers, body):
        headers = auth_headers("usr_u1")
        response = _log(client, "tsk_a", headers, body)

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["code"] == "InvalidTimeLogAmount"
        assert response.json()["message"] == "Please provide hours or minutes greater than 0"

        task = client.get("/api/tasks/tsk_a", headers=headers).json()
        assert task["actualHours"] == 3.5
        assert len(task["timeLogs"]) == 2

    @pytest.mark.parametrize("minutes", [60, -1])
    def test_minutes_out_of_range(self, client, auth_headers, minutes):
        response = _log(client, "tsk_a", auth_headers("usr_u1"), {"hours": 1, "minutes": minutes})
        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["field"] == "minutes"
        assert error["code"] == "MinutesOutOfRange"

    @pytest.mark.parametrize("body", [{"hours": -1}, {"hours": "lots"}, {"hours": 1.5}])
    def test_malformed_hours(self, client, auth_headers, body):
        response = _log(client, "tsk_a", auth_headers("usr_u1"), body)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "hours"

    def test_oversized_hours_rejected_before_any_write(self, client, auth_headers, seeded_db):
        before = seeded_db.count("task_time_logs")
        response = _log(client, "tsk_a", auth_headers("usr_u1"), {"hours": 10**20})
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "hours"
        assert seeded_db.count("task_time_logs") == before

    def test_requires_authentication(self, client):
        response = client.post("/api/tasks/tsk_a/time", json={"hours": 1})
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_revoked_key(self, client, seeded_db, api_keys):
        manager = KeyManager(seeded_db)
        for info in manager.list_keys("usr_u1"):
            manager.revoke_key(info.id)
        response = client.post(
            "/api/tasks/tsk_a/time",
            json={"hours": 1},
            headers={"Authorization": f"Bearer {api_keys['usr_u1']}"},
        )
        assert response.status_code == 401

    def test_forbidden(self, client, auth_headers):
        response = _log(client, "tsk_b", auth_headers("usr_u1"), {"hours": 1})
        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "AccessDenied"

    @pytest.mark.parametrize("task_id", ["tsk_arch", "tsk_missing"])
    def test_not_found(self, client, auth_headers, task_id):
        response = _log(client, task_id, auth_headers("usr_admin"), {"hours": 1})
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "NotFound"

    def test_admin_may_log_anywhere(self, client, auth_headers):
        response = _log(client, "tsk_b", auth_headers("usr_admin"), {"hours": 1})
        assert response.status_code == 200
