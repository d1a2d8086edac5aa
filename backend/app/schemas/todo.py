# app/schemas/todo.py
"""
Pydantic schemas for todo endpoints.
Defines request models for creating/updating todos and the todo payload
returned in responses.
"""
import datetime as dt
from typing import Optional
from pydantic import BaseModel

__all__ = ["TodoCreateIn", "TodoUpdateIn", "TodoOut"]

class TodoCreateIn(BaseModel):
    """
    Request model for creating a todo.
    Trimming and length checks happen in the todo service.
    """
    text: str

class TodoUpdateIn(BaseModel):
    """
    Request model for partially updating a todo.
    Only fields present (and not null) in the request are applied.
    """
    text: Optional[str] = None
    completed: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)

class TodoOut(BaseModel):
    """
    Todo payload as served to clients.
    """
    id: str
    text: str
    completed: bool
    createdAt: dt.datetime
    updatedAt: dt.datetime
    userId: str

    @classmethod
    def from_model(cls, todo) -> "TodoOut":
        return cls(
            id=str(todo.id),
            text=todo.text,
            completed=todo.completed,
            createdAt=todo.created_at,
            updatedAt=todo.updated_at,
            userId=str(todo.user_id),
        )

    def to_json(self) -> dict:
        return self.model_dump(mode="json")
