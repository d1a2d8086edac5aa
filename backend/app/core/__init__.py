# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Error taxonomy and JSON error handlers
- security: Password hashing and session tokens
"""
