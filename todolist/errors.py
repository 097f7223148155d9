"""
errors.py

Domain errors raised by the todo service. Transports (HTTP, MCP) map them
to their own response formats; the message carried here is client-facing.
"""

MISSING_VALUE_MESSAGE = "해야할일(value) 데이터가 존재하지 않습니다."
NOT_FOUND_MESSAGE = "존재하지 않는 todo 데이터입니다."


class TodoError(Exception):
    """Base class for all todo service errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TodoValidationError(TodoError):
    """
    Raised when request data fails validation.

    `reason` names the violated constraint: "missing", "type",
    "too_short" or "too_long".
    """

    def __init__(self, reason: str, message: str, field: str = "value"):
        super().__init__(message)
        self.reason = reason
        self.field = field


class TodoNotFoundError(TodoError):
    """Raised when no todo exists with the requested id"""

    def __init__(self, todo_id: str):
        super().__init__(NOT_FOUND_MESSAGE)
        self.todo_id = todo_id
