"""
todo_repository.py

A narrow, typed repository over the todos table. The service layer only
ever talks to the store through these methods.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional
from uuid import uuid4

from todolist.models.todo import Todo
from todolist.services.database_service import DatabaseService

_COLUMNS = 'id, value, "order", done_at'


class TodoRepository:
    """
    TodoRepository Class

    Every method runs inside the database transaction scope, so a call
    made inside `atomic()` joins the caller's transaction and a call made
    on its own commits immediately.
    """

    def __init__(self, database: DatabaseService):
        self.database = database

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Group several repository calls into one transaction"""
        with self.database.transaction():
            yield

    def insert_with_computed_order(self, value: str) -> Todo:
        """
        Insert a new todo at max(order) + 1, or 1 when the table is empty

        The order is computed and written by a single statement, so no
        other writer can slip in between the read and the insert.
        """
        todo_id = str(uuid4())
        with self.database.transaction() as db:
            db.execute(f'''
                INSERT INTO todos ({_COLUMNS})
                SELECT ?, ?, COALESCE(MAX("order"), 0) + 1, NULL FROM todos
            ''', (todo_id, value))
            row = db.execute(
                f'SELECT {_COLUMNS} FROM todos WHERE id = ?', (todo_id,)
            ).fetchone()
        return self._row_to_todo(row)

    def find_all(self) -> list[Todo]:
        """All todos, highest order first"""
        with self.database.transaction() as db:
            rows = db.execute(
                f'SELECT {_COLUMNS} FROM todos ORDER BY "order" DESC'
            ).fetchall()
        return [self._row_to_todo(row) for row in rows]

    def find_by_id(self, todo_id: str) -> Optional[Todo]:
        with self.database.transaction() as db:
            row = db.execute(
                f'SELECT {_COLUMNS} FROM todos WHERE id = ?', (todo_id,)
            ).fetchone()
        return self._row_to_todo(row) if row else None

    def find_by_order(self, order: int) -> Optional[Todo]:
        with self.database.transaction() as db:
            row = db.execute(
                f'SELECT {_COLUMNS} FROM todos WHERE "order" = ? LIMIT 1', (order,)
            ).fetchone()
        return self._row_to_todo(row) if row else None

    def save(self, todo: Todo) -> None:
        """Write back every mutable field of an existing todo"""
        with self.database.transaction() as db:
            db.execute('''
                UPDATE todos
                SET value = ?, "order" = ?, done_at = ?
                WHERE id = ?
            ''', (
                todo.value,
                todo.order,
                todo.done_at.isoformat() if todo.done_at else None,
                todo.id,
            ))

    def delete_by_id(self, todo_id: str) -> bool:
        """Delete a todo, returning True if a row was removed"""
        with self.database.transaction() as db:
            cursor = db.execute('DELETE FROM todos WHERE id = ?', (todo_id,))
        return cursor.rowcount > 0

    def _row_to_todo(self, row: tuple) -> Todo:
        """Convert a (id, value, order, done_at) row to a Todo"""
        todo_id, value, order, done_at = row
        return Todo(
            id=todo_id,
            value=value,
            order=order,
            done_at=datetime.fromisoformat(done_at) if done_at else None,
        )
