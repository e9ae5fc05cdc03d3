"""
Feature modules for the identity backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- service.py: Business logic implementation
- exceptions.py: Module-specific exceptions

Server modules: tokens (credential signing), auth (identity authority,
cookies, CSRF guard, routes). Client module: session (state machine
consuming the auth routes).

Modules communicate through interfaces, not concrete implementations.
"""
