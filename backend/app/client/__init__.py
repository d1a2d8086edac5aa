# app/client/__init__.py
"""
Client-side todo synchronisation.
- storage: on-device key/value store used when no session is active
- sync: TodoSync, the in-memory todo list backed by the API or local storage
"""
from .storage import LocalStorage, TODOS_KEY
from .sync import LocalSource, RemoteSource, Source, TodoSync
