# app/api/v1/routers/todos.py
from fastapi import APIRouter, Depends, status
from app.api.v1.cors import preflight_response
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.schemas.todo import TodoCreateIn, TodoOut, TodoUpdateIn
from app.services import todos as todo_service

router = APIRouter(prefix="/todos", tags=["todos"])

# ===== Routes =====
@router.get("")
async def list_todos(user: User = Depends(get_current_user)):
    """
    Get all todos of the authenticated user, newest first.

    Returns:
        dict: {"data": [todo, ...]}

    Raises:
        Unauthorized (401): If user is not authenticated
    """
    rows = await todo_service.list_todos(user)
    return {"data": [TodoOut.from_model(t).to_json() for t in rows]}

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_todo(body: TodoCreateIn, user: User = Depends(get_current_user)):
    """
    Create a todo for the authenticated user.

    The text is trimmed before storage; it must not be empty afterwards nor
    exceed the configured maximum length.

    Returns:
        dict: {"data": todo, "message": ...} with 201

    Raises:
        ValidationError (400): empty or oversized text
        Unauthorized (401): If user is not authenticated
    """
    todo = await todo_service.create_todo(user, body.text)
    return {"data": TodoOut.from_model(todo).to_json(), "message": "Todo créé avec succès"}

@router.options("")
async def todos_preflight():
    return preflight_response("GET, POST, OPTIONS")

@router.get("/{todo_id}")
async def get_todo(todo_id: str, user: User = Depends(get_current_user)):
    """
    Get one todo.

    Raises:
        Unauthorized (401): If user is not authenticated
        NotFound (404): If the todo does not exist or belongs to another user
    """
    todo = await todo_service.get_todo(todo_id, user)
    return {"data": TodoOut.from_model(todo).to_json()}

@router.patch("/{todo_id}")
async def update_todo(todo_id: str, body: TodoUpdateIn, user: User = Depends(get_current_user)):
    """
    Partially update a todo (text and/or completed).

    Raises:
        ValidationError (400): text present but empty after trimming
        Unauthorized (401): If user is not authenticated
        NotFound (404): If the todo does not exist or belongs to another user
    """
    todo = await todo_service.update_todo(todo_id, user, body.changes())
    return {"data": TodoOut.from_model(todo).to_json(), "message": "Todo mis à jour avec succès"}

@router.delete("/{todo_id}")
async def delete_todo(todo_id: str, user: User = Depends(get_current_user)):
    """
    Delete a todo permanently.

    Raises:
        Unauthorized (401): If user is not authenticated
        NotFound (404): If the todo does not exist or belongs to another user
    """
    await todo_service.delete_todo(todo_id, user)
    return {"data": None, "message": "Todo supprimé avec succès"}

@router.options("/{todo_id}")
async def todo_preflight(todo_id: str):
    return preflight_response("GET, PATCH, DELETE, OPTIONS")
