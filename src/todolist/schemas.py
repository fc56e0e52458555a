from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Largest id SQLite can store in an INTEGER column.
MAX_TODO_ID = 2**63 - 1


def _require_text(value: str, field: str) -> str:
    """
    Strip whitespace and reject empty text.
    """
    s = value.strip()
    if not s:
        raise ValueError(f"{field} cannot be empty")
    return s


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, and bread",
                "is_done": False,
            }
        }
    )

    title: str = Field(..., description="Title of the task", min_length=1)
    description: str = Field(..., description="Detailed information about the task", min_length=1)
    is_done: bool = Field(default=False, description="Whether the task is completed")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _require_text(v, "title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _require_text(v, "description")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing todo item.
    The id is required; only the other fields that are provided will be updated.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy groceries and fruits",
                "description": "Milk, eggs, bread, and bananas",
                "is_done": True,
            }
        }
    )

    id: int = Field(..., description="ID of the todo item to update", le=MAX_TODO_ID)
    title: Optional[str] = Field(default=None, description="New title for the task")
    description: Optional[str] = Field(default=None, description="New description for the task")
    is_done: Optional[bool] = Field(default=None, description="Updated completion status")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """
        If title is provided, strip whitespace and reject empty text.
        """
        if v is None:
            return v
        return _require_text(v, "title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _require_text(v, "description")

    def changes(self) -> dict:
        """
        Return only the fields that should be written, keyed by column name.
        """
        return self.model_dump(exclude={"id"}, exclude_none=True)


# PUBLIC_INTERFACE
class TodoId(BaseModel):
    """
    Identifier-only payload used by lookups and deletes.
    """

    id: int = Field(..., description="ID of the todo item", le=MAX_TODO_ID)


# PUBLIC_INTERFACE
class TodoView(BaseModel):
    """
    Read representation of a todo item returned by every transport.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy groceries",
                "description": "Milk, eggs, and bread",
                "is_done": False,
                "created_at": "2025-05-09T10:45:00.000Z",
                "updated_at": "2025-05-09T10:45:00.000Z",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the task")
    description: str = Field(..., description="Task description")
    is_done: bool = Field(..., description="Whether the task is completed")
    created_at: str = Field(..., description="Creation timestamp (ISO-8601)")
    updated_at: str = Field(..., description="Last update timestamp (ISO-8601)")
