# app/models/user.py
"""
Database model for users.
Represents a registered account: display name, login email and password hash.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Todos (one-to-many, via related_name="todos")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email must be unique; it is matched exactly, case preserved as stored
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    name = fields.CharField(max_length=50)  # Display name
    email = fields.CharField(max_length=255, unique=True, index=True)  # Login email (unique, indexed)
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never sent to clients
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name
