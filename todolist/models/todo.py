"""
todo.py

This file defines the core data model for the Todo application, along with
the validation schemas for the create and update operations.

Pydantic gives us runtime validation with per-constraint error types, which
we translate into TodoValidationError so transports never see pydantic
internals.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from todolist.errors import MISSING_VALUE_MESSAGE, TodoValidationError

VALUE_MIN_LENGTH = 1
VALUE_MAX_LENGTH = 50

# SQLite INTEGER is a signed 64-bit value.
ORDER_MIN = -2**63
ORDER_MAX = 2**63 - 1


class Todo(BaseModel):
    """
    Todo Interface

    - IDs are UUID4 strings generated by the repository on insert
    - value is the task description
    - order is unique across todos; higher values are listed first
    - done_at is None until the todo is marked done
    """
    id: str
    value: str
    order: int
    done_at: Optional[datetime] = Field(None, alias="doneAt")

    class Config:
        populate_by_name = True  # Allow both snake_case and camelCase

    @property
    def is_done(self) -> bool:
        return self.done_at is not None

    def to_json(self) -> dict:
        """JSON shape sent to clients: {id, value, order, doneAt}"""
        return self.model_dump(by_alias=True, mode="json")


# Input Validation Schemas
#
# Create requires a value; update treats every field as optional so that
# absent fields mean "no change".

class CreateTodoSchema(BaseModel):
    value: str = Field(
        ...,
        strict=True,
        min_length=VALUE_MIN_LENGTH,
        max_length=VALUE_MAX_LENGTH,
        description="Task description (1-50 characters)",
    )

    class Config:
        str_strip_whitespace = True


class UpdateTodoSchema(BaseModel):
    order: Optional[int] = Field(None, ge=ORDER_MIN, le=ORDER_MAX, description="Order to move the todo to; swaps with its current holder")
    value: Optional[str] = Field(None, description="New task description")
    done: Optional[bool] = Field(None, description="True marks done, false/null clears it")

    @property
    def done_provided(self) -> bool:
        """True when the payload carried a `done` key, even if null"""
        return "done" in self.model_fields_set


_CREATE_ERROR_MESSAGES = {
    "string_type": ("type", "해야할일(value) 데이터는 문자열이어야 합니다."),
    "string_too_short": ("too_short", f"해야할일(value) 데이터는 최소 {VALUE_MIN_LENGTH}글자 이상이어야 합니다."),
    "string_too_long": ("too_long", f"해야할일(value) 데이터는 최대 {VALUE_MAX_LENGTH}글자 이하여야 합니다."),
}


def validate_create_value(value: Any) -> CreateTodoSchema:
    """
    Validate the `value` of a create request

    None is treated the same as an absent key. Raises TodoValidationError
    naming the first violated constraint.
    """
    if value is None:
        raise TodoValidationError("missing", MISSING_VALUE_MESSAGE)
    try:
        return CreateTodoSchema(value=value)
    except ValidationError as exc:
        error_type = exc.errors()[0]["type"]
        reason, message = _CREATE_ERROR_MESSAGES.get(
            error_type, ("type", "해야할일(value) 데이터가 올바르지 않습니다.")
        )
        raise TodoValidationError(reason, message) from exc


def parse_update_payload(payload: Optional[dict]) -> UpdateTodoSchema:
    """
    Parse a partial update payload

    Unknown keys are ignored. A wrongly typed field raises
    TodoValidationError with reason "type".
    """
    try:
        return UpdateTodoSchema.model_validate(payload or {})
    except ValidationError as exc:
        first = exc.errors()[0]
        field = str(first["loc"][0]) if first["loc"] else "body"
        raise TodoValidationError(
            "type", f"{field} 데이터의 형식이 올바르지 않습니다.", field=field
        ) from exc
