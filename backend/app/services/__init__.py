"""
Services Module

Business logic behind the REST routes:
- auth_gate: credential checks, registration, session resolution
- todos: ownership-scoped todo CRUD
"""
