"""
Feature modules for Postly backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- repository.py: Supabase table access, where the module owns a table
- service.py: Business logic implementation
- routes.py: FastAPI route handlers, where the module exposes endpoints
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
The integrity module is the exception: it is the only writer of the
user/post reference fields and is injected into the services directly.
"""
