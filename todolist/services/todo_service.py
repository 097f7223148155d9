"""
todo_service.py

This service implements the business logic for managing todos: create,
list, reorder/update and delete. It validates input, keeps the order
column unique and logs every mutation. Storage is reached only through
the injected TodoRepository.
"""
from datetime import datetime, timezone
from typing import Any, Optional

import structlog

from todolist.errors import TodoNotFoundError
from todolist.models.todo import (
    Todo,
    parse_update_payload,
    validate_create_value,
)
from todolist.repositories.todo_repository import TodoRepository

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TodoService:
    """
    TodoService Class

    Create and update each run inside a single repository transaction, so
    the max-order lookup and insert, and the swap followed by the move,
    are never interleaved with another request in this process.
    """

    def __init__(self, repository: TodoRepository, clock=_utcnow):
        self.repository = repository
        self.clock = clock

    def create_todo(self, value: Any) -> Todo:
        """
        Create a new todo at the top of the list

        1. Validates value (required string, 1-50 characters once trimmed)
        2. Inserts it with order = current max + 1, or 1 for an empty list

        Raises:
            TodoValidationError: value is missing, not a string, or out of range
        """
        data = validate_create_value(value)
        with self.repository.atomic():
            todo = self.repository.insert_with_computed_order(data.value)
        logger.info("todo_created", todo_id=todo.id, order=todo.order)
        return todo

    def list_todos(self) -> list[Todo]:
        """All todos, highest order first"""
        return self.repository.find_all()

    def get_todo(self, todo_id: str) -> Todo:
        todo = self.repository.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def update_todo(self, todo_id: str, changes: Optional[dict]) -> Todo:
        """
        Apply a partial update to a todo

        Only keys present in `changes` are touched:
        - order: if another todo holds it, that todo takes over this
          todo's old order first (swap), then this todo moves
        - value: replaces the description when non-empty
        - done: sets done_at to now when truthy, clears it otherwise

        Returns the updated todo.

        Raises:
            TodoValidationError: a field has the wrong type
            TodoNotFoundError: no todo has this id
        """
        data = parse_update_payload(changes)

        with self.repository.atomic():
            current = self.get_todo(todo_id)

            if data.order:
                target = self.repository.find_by_order(data.order)
                if target is not None and target.id != current.id:
                    target.order = current.order
                    self.repository.save(target)
                    logger.info(
                        "todo_swapped",
                        todo_id=target.id,
                        order=target.order,
                        displaced_by=current.id,
                    )
                current.order = data.order

            if data.value:
                current.value = data.value

            if data.done_provided:
                current.done_at = self.clock() if data.done else None

            self.repository.save(current)

        logger.info(
            "todo_updated",
            todo_id=current.id,
            fields=sorted(data.model_fields_set),
        )
        return current

    def delete_todo(self, todo_id: str) -> Todo:
        """
        Delete a todo by id, returning what was removed

        Raises:
            TodoNotFoundError: no todo has this id
        """
        with self.repository.atomic():
            todo = self.get_todo(todo_id)
            self.repository.delete_by_id(todo_id)
        logger.info("todo_deleted", todo_id=todo_id)
        return todo
