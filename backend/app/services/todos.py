# app/services/todos.py
"""
Todo service: ownership-scoped CRUD over the Todo table.

Every lookup goes through find_todo(todo_id, owner_id), which checks existence
and ownership in one query. A todo owned by someone else is reported exactly
like a missing one.
"""
import logging
import uuid

from app.config import settings
from app.core.errors import NotFound, ValidationError
from app.models.todo import Todo
from app.models.user import User

logger = logging.getLogger("uvicorn.error")

EMPTY_TEXT_MESSAGE = "Le texte ne peut pas être vide"
TEXT_TOO_LONG_MESSAGE = "Texte trop long"
NOT_FOUND_MESSAGE = "Todo non trouvé"


def clean_text(text: str | None) -> str:
    """Trim a todo text and enforce the non-empty / max-length rules."""
    value = (text or "").strip()
    if not value:
        raise ValidationError(EMPTY_TEXT_MESSAGE)
    if len(value) > settings.todo_text_max_length:
        raise ValidationError(TEXT_TOO_LONG_MESSAGE)
    return value


async def find_todo(todo_id, owner_id) -> Todo | None:
    try:
        pk = uuid.UUID(str(todo_id))
    except ValueError:
        return None
    return await Todo.get_or_none(id=pk, user_id=owner_id)


async def _owned_or_404(todo_id, owner: User) -> Todo:
    todo = await find_todo(todo_id, owner.id)
    if not todo:
        raise NotFound(NOT_FOUND_MESSAGE)
    return todo


async def list_todos(owner: User) -> list[Todo]:
    """All todos of `owner`, newest first."""
    return await Todo.filter(user_id=owner.id).order_by("-created_at")


async def get_todo(todo_id, owner: User) -> Todo:
    return await _owned_or_404(todo_id, owner)


async def create_todo(owner: User, text: str | None) -> Todo:
    """
    Insert a new todo for `owner`.

    Raises:
        ValidationError: text is empty after trimming or too long
    """
    todo = await Todo.create(user=owner, text=clean_text(text), completed=False)
    logger.info("[todos] created todo=%s user=%s", todo.id, owner.id)
    return todo


async def update_todo(todo_id, owner: User, changes: dict) -> Todo:
    """
    Apply a partial update. Only "text" and "completed" are honoured; keys
    absent from `changes` keep their stored value. updated_at is refreshed.

    Raises:
        NotFound: no todo with this id belongs to `owner`
        ValidationError: "text" is present but empty after trimming
    """
    todo = await _owned_or_404(todo_id, owner)
    if "text" in changes:
        todo.text = clean_text(changes["text"])
    if "completed" in changes:
        todo.completed = bool(changes["completed"])
    await todo.save()
    return todo


async def delete_todo(todo_id, owner: User) -> None:
    """
    Remove a todo permanently.

    Raises:
        NotFound: no todo with this id belongs to `owner`
    """
    todo = await _owned_or_404(todo_id, owner)
    await todo.delete()
    logger.info("[todos] deleted todo=%s user=%s", todo.id, owner.id)
