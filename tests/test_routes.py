"""Tests for the HTTP API endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from todolist.api.app import create_app
from todolist.services.database_service import DatabaseService


def _create(client: TestClient, value: str) -> dict:
    response = client.post("/todos", json={"value": value})
    assert response.status_code == 201
    return response.json()["todo"]


class TestCreateTodo:
    def test_returns_created_todo(self, client: TestClient) -> None:
        response = client.post("/todos", json={"value": "buy milk"})
        assert response.status_code == 201
        todo = response.json()["todo"]
        assert set(todo) == {"id", "value", "order", "doneAt"}
        assert todo["value"] == "buy milk"
        assert todo["order"] == 1
        assert todo["doneAt"] is None

    def test_missing_value_is_400(self, client: TestClient) -> None:
        response = client.post("/todos", json={})
        assert response.status_code == 400
        assert response.json() == {"errorMessage": "해야할일(value) 데이터가 존재하지 않습니다."}

    def test_missing_body_is_400(self, client: TestClient) -> None:
        response = client.post("/todos")
        assert response.status_code == 400
        assert "errorMessage" in response.json()

    def test_non_object_body_is_400(self, client: TestClient) -> None:
        response = client.post("/todos", json=["buy milk"])
        assert response.status_code == 400

    def test_invalid_json_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/todos", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert "errorMessage" in response.json()

    def test_invalid_values_leave_list_unchanged(self, client: TestClient) -> None:
        for value in ["", "x" * 51, 42, None]:
            response = client.post("/todos", json={"value": value})
            assert response.status_code == 400
            assert response.json()["errorMessage"]
        assert client.get("/todos").json() == {"todos": []}


class TestListTodos:
    def test_empty(self, client: TestClient) -> None:
        response = client.get("/todos")
        assert response.status_code == 200
        assert response.json() == {"todos": []}

    def test_newest_first(self, client: TestClient) -> None:
        _create(client, "buy milk")
        _create(client, "walk dog")
        todos = client.get("/todos").json()["todos"]
        assert [(t["value"], t["order"]) for t in todos] == [("walk dog", 2), ("buy milk", 1)]


class TestUpdateTodo:
    def test_reorder_swaps(self, client: TestClient) -> None:
        _create(client, "buy milk")
        _create(client, "walk dog")
        first = client.get("/todos").json()["todos"][0]

        response = client.patch(f"/todos/{first['id']}", json={"order": 1})

        assert response.status_code == 200
        assert response.json() == {}
        todos = client.get("/todos").json()["todos"]
        assert [(t["value"], t["order"]) for t in todos] == [("buy milk", 2), ("walk dog", 1)]

    def test_done_round_trip(self, client: TestClient) -> None:
        todo = _create(client, "buy milk")

        client.patch(f"/todos/{todo['id']}", json={"done": True})
        done_at = client.get("/todos").json()["todos"][0]["doneAt"]
        assert done_at is not None

        client.patch(f"/todos/{todo['id']}", json={"value": "buy bread"})
        after_value = client.get("/todos").json()["todos"][0]
        assert after_value["doneAt"] == done_at
        assert after_value["value"] == "buy bread"

        client.patch(f"/todos/{todo['id']}", json={"done": False})
        assert client.get("/todos").json()["todos"][0]["doneAt"] is None

    def test_unknown_id_is_404(self, client: TestClient) -> None:
        _create(client, "buy milk")
        before = client.get("/todos").json()

        response = client.patch("/todos/does-not-exist", json={"order": 1})

        assert response.status_code == 404
        assert response.json() == {"errorMessage": "존재하지 않는 todo 데이터입니다."}
        assert client.get("/todos").json() == before

    def test_wrongly_typed_field_is_400(self, client: TestClient) -> None:
        todo = _create(client, "buy milk")
        response = client.patch(f"/todos/{todo['id']}", json={"done": "maybe"})
        assert response.status_code == 400

    def test_order_beyond_sqlite_integer_is_400(self, client: TestClient) -> None:
        todo = _create(client, "buy milk")

        response = client.patch(f"/todos/{todo['id']}", json={"order": 10**20})

        assert response.status_code == 400
        assert client.get("/todos").json()["todos"] == [todo]

    def test_empty_body_changes_nothing(self, client: TestClient) -> None:
        todo = _create(client, "buy milk")
        response = client.patch(f"/todos/{todo['id']}")
        assert response.status_code == 200
        assert client.get("/todos").json()["todos"] == [todo]


class TestDeleteTodo:
    def test_deletes(self, client: TestClient) -> None:
        milk = _create(client, "buy milk")
        dog = _create(client, "walk dog")

        response = client.delete(f"/todos/{milk['id']}")

        assert response.status_code == 200
        assert response.json() == {}
        assert [t["id"] for t in client.get("/todos").json()["todos"]] == [dog["id"]]

    def test_unknown_id_is_404(self, client: TestClient) -> None:
        _create(client, "buy milk")
        response = client.delete("/todos/does-not-exist")
        assert response.status_code == 404
        assert len(client.get("/todos").json()["todos"]) == 1


class TestErrorHandling:
    def test_unexpected_error_is_500(self, database: DatabaseService, monkeypatch) -> None:
        app = create_app(database=database)
        service = app.state.todo_service

        def boom():
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(service, "list_todos", boom)
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/todos")

        assert response.status_code == 500
        assert response.json() == {"errorMessage": "예상치 못한 에러가 발생하였습니다."}


class TestLifespan:
    def test_opens_database_from_config(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("TODO_DB_FOLDER", str(tmp_path / "data"))
        monkeypatch.setenv("TODO_DB_FILE", "todos.sqlite")

        with TestClient(create_app()) as client:
            _create(client, "buy milk")
            assert len(client.get("/todos").json()["todos"]) == 1

        assert (tmp_path / "data" / "todos.sqlite").exists()
