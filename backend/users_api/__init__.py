"""
Users API — Application Package Initializer
=============================================

What: Marks the `users_api` directory as a Python package.
Why:  Enables module imports like `from users_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The service follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     UserService (Orchestrator)      │  ← Validation, business rules
    ├─────────────────────────────────────┤
    │  UserRepository │ PasswordHasher    │  ← Persistence, credentials
    │  is_valid_email                     │
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes translate an Outcome into a response; every decision about
    status codes and messages is made by the orchestrator.
"""

__version__ = "1.0.0"
