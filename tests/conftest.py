"""Shared pytest fixtures for the todo service tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from todolist.api.app import create_app
from todolist.config import MEMORY_DB
from todolist.repositories.todo_repository import TodoRepository
from todolist.services.database_service import DatabaseService
from todolist.services.todo_service import TodoService

FIXED_NOW = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def database() -> DatabaseService:
    """Fresh in-memory database with the schema created."""
    db = DatabaseService(path=MEMORY_DB)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def repository(database: DatabaseService) -> TodoRepository:
    return TodoRepository(database)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def service(repository: TodoRepository, now: datetime) -> TodoService:
    """Service whose clock is frozen at `now`."""
    return TodoService(repository, clock=lambda: now)


@pytest.fixture
def client(database: DatabaseService) -> TestClient:
    """HTTP client against an app bound to the in-memory database."""
    return TestClient(create_app(database=database))
