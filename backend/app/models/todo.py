# app/models/todo.py
import uuid
from tortoise import fields, models

class Todo(models.Model):
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="todos",
        on_delete=fields.CASCADE,
    )  # Owner; every server-side todo belongs to exactly one user
    text = fields.CharField(max_length=500)  # Stored trimmed, never empty
    completed = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)  # Refreshed on every save

    class Meta:
        table = "todos"
        ordering = ["-created_at"]
