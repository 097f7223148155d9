"""
formatters.py

Utility functions that turn todos into human-readable markdown for the
MCP tool surface, plus the MCP error envelope.
"""
from todolist.models.todo import Todo


def format_todo(todo: Todo) -> str:
    """
    Format a todo item as a markdown section

    Completed todos get a check mark and their completion time.

    Args:
        todo: The Todo object to format

    Returns:
        A markdown-formatted string representation
    """
    if todo.is_done:
        status_emoji = '✓'
        status_text = f"Status: Done at {todo.done_at.isoformat()}"
    else:
        status_emoji = '✗'
        status_text = "Status: Not done"

    return f"""
## {todo.order}. {todo.value} {status_emoji}

Order: {todo.order}
ID: {todo.id}
{status_text}
""".strip()


def format_todo_list(todos: list[Todo]) -> str:
    """
    Format a list of todos as a markdown document with a title

    Args:
        todos: List of Todo objects to format, already in display order

    Returns:
        A markdown-formatted string with the complete list
    """
    if len(todos) == 0:
        return "No todos found."

    todo_items = '\n\n---\n\n'.join(format_todo(todo) for todo in todos)
    return f"# Todo List ({len(todos)} items)\n\n{todo_items}"


def create_error_response(message: str) -> dict:
    """
    Create error response for MCP tool calls

    Wraps the message in a text content block with the isError flag set.
    """
    return {
        "content": [
            {
                "type": "text",
                "text": message,
            },
        ],
        "isError": True,
    }
