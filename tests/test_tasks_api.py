from datetime import datetime
from pathlib import Path

from taskflow_api import json_store


def create_task_payload(
    title="Test Task",
    category="Work",
    priority="medium",
    due_date=None,
):
    payload = {
        "title": title,
        "category": category,
        "priority": priority,
    }
    if due_date is not None:
        payload["dueDate"] = due_date
    return payload


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def assert_task_shape(task: dict):
    for key in ["id", "title", "category", "priority", "completed", "createdAt"]:
        assert key in task
    assert "dueDate" in task
    assert isinstance(task["id"], int)
    assert isinstance(task["title"], str)
    assert isinstance(task["completed"], bool)
    parse_ts(task["createdAt"])


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/api/health")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] == "json"


class TestSeedCollection:
    def test_list_returns_seed_tasks_in_order(self, client):
        res = client.get("/api/tasks")
        assert res.status_code == 200
        tasks = res.json()
        assert [t["id"] for t in tasks] == [1, 2, 3, 4]
        assert tasks[0]["title"] == "Complete web app assignment"
        assert tasks[0]["dueDate"] == "2025-01-15"
        for t in tasks:
            assert_task_shape(t)

    def test_seed_stats(self, client):
        res = client.get("/api/stats")
        assert res.status_code == 200
        stats = res.json()
        assert stats["total"] == 4
        assert stats["completed"] == 1
        assert stats["pending"] == 3
        assert stats["highPriority"] == 1
        assert stats["byCategory"] == {"Study": 2, "Work": 1, "Personal": 1}

    def test_seed_file_written_on_first_run(self, client, settings):
        records = json_store.read_json_array(Path(settings.tasks_file_path))
        assert len(records) == 4
        assert records[1]["completed"] is True


class TestTasksCRUD:
    def test_create_on_empty_collection_gets_id_1(self, empty_client):
        res = empty_client.post("/api/tasks", json={"title": "X", "category": "Work", "priority": "low"})
        assert res.status_code == 201
        task = res.json()
        assert_task_shape(task)
        assert task["id"] == 1
        assert task["completed"] is False
        assert task["dueDate"] is None

    def test_create_then_list_contains_exactly_one_match(self, client):
        payload = create_task_payload(title="Pay bills", category="Home", priority="high", due_date="2099-12-25")
        res = client.post("/api/tasks", json=payload)
        assert res.status_code == 201
        created = res.json()
        assert created["id"] == 5
        assert created["dueDate"] == "2099-12-25"

        tasks = client.get("/api/tasks").json()
        matches = [t for t in tasks if t["title"] == "Pay bills"]
        assert len(matches) == 1
        assert matches[0] == created
        assert matches[0]["completed"] is False

    def test_create_ignores_client_supplied_completed_and_id(self, client):
        payload = create_task_payload(title="Sneaky")
        payload.update({"id": 1, "completed": True, "createdAt": "2000-01-01T00:00:00Z"})
        res = client.post("/api/tasks", json=payload)
        assert res.status_code == 201
        task = res.json()
        assert task["id"] == 5
        assert task["completed"] is False
        assert parse_ts(task["createdAt"]).year > 2000

    def test_serial_creates_get_increasing_ids(self, empty_client):
        ids = []
        for i in range(5):
            res = empty_client.post("/api/tasks", json=create_task_payload(title=f"Task {i}"))
            ids.append(res.json()["id"])
        assert ids == [1, 2, 3, 4, 5]

    def test_id_after_deleting_last_is_reused_from_max(self, client):
        assert client.delete("/api/tasks/4").status_code == 200
        res = client.post("/api/tasks", json=create_task_payload())
        assert res.json()["id"] == 4

    def test_get_task_and_not_found(self, client):
        res = client.get("/api/tasks/3")
        assert res.status_code == 200
        assert res.json()["title"] == "Plan weekly schedule"

        res_404 = client.get("/api/tasks/999")
        assert res_404.status_code == 404
        assert res_404.json()["detail"] == "Task not found"

    def test_update_completed_leaves_other_fields(self, client):
        before = client.get("/api/tasks/1").json()
        res = client.put("/api/tasks/1", json={"completed": True})
        assert res.status_code == 200
        after = res.json()
        assert after["completed"] is True
        assert {k: v for k, v in after.items() if k != "completed"} == {
            k: v for k, v in before.items() if k != "completed"
        }

        listed = next(t for t in client.get("/api/tasks").json() if t["id"] == 1)
        assert listed == after

    def test_update_toggles_back_to_pending(self, client):
        res = client.put("/api/tasks/2", json={"completed": False})
        assert res.status_code == 200
        assert res.json()["completed"] is False
        assert client.get("/api/stats").json()["completed"] == 0

    def test_update_multiple_fields_and_clear_due_date(self, client):
        res = client.put(
            "/api/tasks/3",
            json={"title": "Plan monthly schedule", "priority": "high", "dueDate": None},
        )
        assert res.status_code == 200
        task = res.json()
        assert task["title"] == "Plan monthly schedule"
        assert task["priority"] == "high"
        assert task["dueDate"] is None
        assert task["category"] == "Personal"

    def test_update_unknown_id_leaves_collection_unchanged(self, client):
        before = client.get("/api/tasks").json()
        res = client.put("/api/tasks/999", json={"completed": True})
        assert res.status_code == 404
        assert res.json()["detail"] == "Task not found"
        assert client.get("/api/tasks").json() == before

    def test_delete_task(self, client):
        res = client.delete("/api/tasks/2")
        assert res.status_code == 200
        assert res.json() == {"message": "Task deleted successfully"}

        ids = [t["id"] for t in client.get("/api/tasks").json()]
        assert ids == [1, 3, 4]

        res_again = client.delete("/api/tasks/2")
        assert res_again.status_code == 404
        assert res_again.json()["detail"] == "Task not found"


class TestStats:
    def test_totals_stay_consistent_through_mutations(self, client):
        def check():
            stats = client.get("/api/stats").json()
            tasks = client.get("/api/tasks").json()
            assert stats["total"] == stats["completed"] + stats["pending"]
            assert stats["total"] == len(tasks)
            assert sum(stats["byCategory"].values()) == stats["total"]
            return stats

        check()
        client.post("/api/tasks", json=create_task_payload(priority="high", category="Errands"))
        stats = check()
        assert stats["highPriority"] == 2
        assert stats["byCategory"]["Errands"] == 1

        client.put("/api/tasks/1", json={"completed": True})
        stats = check()
        assert stats["highPriority"] == 1
        assert stats["completed"] == 2

        client.delete("/api/tasks/2")
        check()

    def test_empty_collection(self, empty_client):
        stats = empty_client.get("/api/stats").json()
        assert stats == {"total": 0, "completed": 0, "pending": 0, "highPriority": 0, "byCategory": {}}


class TestValidationErrors:
    def test_create_title_blank(self, client):
        res = client.post("/api/tasks", json=create_task_payload(title="  "))
        assert res.status_code == 422
        body = res.json()
        assert body.get("error") == "ValidationError"
        assert body.get("message") == "Request validation failed"
        assert isinstance(body.get("detail"), list)

    def test_create_invalid_priority(self, client):
        res = client.post("/api/tasks", json=create_task_payload(priority="urgent"))
        assert res.status_code == 422

    def test_create_empty_due_date_means_none(self, client):
        res = client.post("/api/tasks", json=create_task_payload(due_date=""))
        assert res.status_code == 201
        assert res.json()["dueDate"] is None

    def test_create_datetime_due_date_is_truncated(self, client):
        res = client.post("/api/tasks", json=create_task_payload(due_date="2030-05-01T13:45:00"))
        assert res.status_code == 201
        assert res.json()["dueDate"] == "2030-05-01"

    def test_update_bad_due_date(self, client):
        res = client.put("/api/tasks/1", json={"dueDate": "not-a-date"})
        assert res.status_code == 422
        assert res.json().get("error") == "ValidationError"

    def test_update_rejects_immutable_fields(self, client):
        before = client.get("/api/tasks/1").json()
        for patch in ({"id": 42}, {"createdAt": "2001-01-01T00:00:00Z"}):
            res = client.put("/api/tasks/1", json=patch)
            assert res.status_code == 422
            assert res.json()["error"] == "ValidationError"
        assert client.get("/api/tasks/1").json() == before

    def test_non_integer_id(self, client):
        res = client.put("/api/tasks/abc", json={"completed": True})
        assert res.status_code == 422


class TestStorageErrors:
    def test_write_failure_returns_500_and_commits_nothing(self, client, monkeypatch):
        before = client.get("/api/tasks").json()

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(json_store.os, "replace", broken_replace)
        res = client.post("/api/tasks", json=create_task_payload(title="Lost"))
        assert res.status_code == 500
        assert res.json() == {"error": "StorageError", "message": "Task storage is unavailable"}

        monkeypatch.undo()
        assert client.get("/api/tasks").json() == before

    def test_undecodable_task_file_serves_seed(self, client, settings):
        Path(settings.tasks_file_path).write_bytes(b"\xff\xfe[garbage")
        res = client.get("/api/tasks")
        assert res.status_code == 200
        assert [t["id"] for t in res.json()] == [1, 2, 3, 4]
        assert client.get("/api/stats").json()["total"] == 4

    def test_read_failure_returns_500(self, client, settings):
        path = Path(settings.tasks_file_path)
        path.unlink()
        path.mkdir()
        assert client.get("/api/tasks").status_code == 500
        assert client.get("/api/stats").status_code == 500
        assert client.delete("/api/tasks/1").status_code == 500
