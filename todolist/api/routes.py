"""
API routes for the todo list.
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from todolist.services.todo_service import TodoService

router = APIRouter(prefix="/todos", tags=["todos"])


def get_todo_service(request: Request) -> TodoService:
    """Resolve the service the app was built with"""
    return request.app.state.todo_service


def _as_object(payload: Any) -> dict:
    # Absent, null or non-object bodies behave like {}.
    return payload if isinstance(payload, dict) else {}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_todo(
    payload: Any = Body(None),
    service: TodoService = Depends(get_todo_service),
):
    """Create a todo at the top of the list."""
    todo = service.create_todo(_as_object(payload).get("value"))
    return {"todo": todo.to_json()}


@router.get("")
def list_todos(service: TodoService = Depends(get_todo_service)):
    """List todos, highest order first."""
    return {"todos": [todo.to_json() for todo in service.list_todos()]}


@router.patch("/{todo_id}")
def update_todo(
    todo_id: str,
    payload: Any = Body(None),
    service: TodoService = Depends(get_todo_service),
):
    """Reorder a todo, change its value, or mark it done/undone."""
    service.update_todo(todo_id, _as_object(payload))
    return {}


@router.delete("/{todo_id}")
def delete_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    """Delete a todo."""
    service.delete_todo(todo_id)
    return {}
