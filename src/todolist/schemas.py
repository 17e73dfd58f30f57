from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Todo


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a Todo item.

    id may be omitted or 0, in which case the service assigns one.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "buy milk",
                "completed": False,
                "order": 1,
            }
        }
    )

    id: int = Field(default=0, ge=0, description="Identifier; 0 or omitted to let the service assign one")
    title: Optional[str] = Field(default=None, description="Short title for the todo item")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")
    order: Optional[int] = Field(default=None, description="Sort hint")

    @field_validator("id", mode="before")
    @classmethod
    def default_id(cls, v):
        """Treat an explicit null id like an omitted one."""
        return 0 if v is None else v

    def to_todo(self) -> Todo:
        return Todo(id=self.id, title=self.title, completed=self.completed, order=self.order)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for partially updating a Todo item.
    All fields are optional; unset fields keep their stored value.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "completed": True,
            }
        }
    )

    id: Optional[int] = Field(default=None, description="Ignored; the path id is authoritative")
    title: Optional[str] = Field(default=None, description="Short title for the todo item")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")
    order: Optional[int] = Field(default=None, description="Accepted but not applied; order is kept from the stored item")

    def to_patch(self) -> Todo:
        return Todo(title=self.title, completed=self.completed, order=self.order)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "buy milk",
                "completed": False,
                "order": 1,
                "url": "http://localhost:8082/todos/1",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: Optional[str] = Field(default=None, description="Short title for the todo item")
    completed: bool = Field(default=False, description="Completion status flag")
    order: Optional[int] = Field(default=None, description="Sort hint")
    url: Optional[str] = Field(default=None, description="Location of this todo item")

    @field_validator("completed", mode="before")
    @classmethod
    def default_completed(cls, v: Optional[bool]) -> bool:
        return False if v is None else v

    @classmethod
    def from_todo(cls, todo: Todo) -> "TodoOut":
        data = todo.to_dict()
        data["completed"] = todo.is_completed
        return cls(**data)
