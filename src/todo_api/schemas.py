from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# PUBLIC_INTERFACE
class TodoRequest(BaseModel):
    """
    Schema for the body of create and update requests.

    ``id`` and ``created_at`` may be sent by clients echoing a TodoOut back;
    they are ignored since neither is client-controlled.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "completed": False,
            }
        },
    )

    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(default=False, description="Completion status flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Strip whitespace and reject empty titles.
        """
        s = v.strip()
        if not s:
            raise ValueError("title is required")
        return s

    @field_validator("completed", mode="before")
    @classmethod
    def null_completed_is_false(cls, v):
        return False if v is None else v


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "65f1c0e2a1b2c3d4e5f60718",
                "title": "Buy groceries",
                "completed": False,
                "created_at": "2025-01-25T10:15:30.123000",
            }
        }
    )

    id: str = Field(..., description="Hex string form of the store identifier")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")


class TodoList(BaseModel):
    data: List[TodoOut] = Field(..., description="Every stored Todo item")


class TodoCreated(BaseModel):
    message: str = Field("todo created successfully")
    todo_id: str = Field(..., description="Identifier assigned by the store")


class TodoUpdated(BaseModel):
    message: str = Field("todo updated successfully")
    updated: int = Field(..., description="Number of documents modified (0 when the id matched nothing)")


class TodoDeleted(BaseModel):
    message: str = Field("todo deleted successfully")
    deleted: int = Field(..., description="Number of documents removed (0 when the id matched nothing)")


class ErrorBody(BaseModel):
    message: str
    error: Optional[str] = None
