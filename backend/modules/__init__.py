"""
Feature modules for the Folio backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- exceptions.py: Module-specific exceptions
- repository.py / service.py: Data access and business logic

Modules communicate through interfaces, not concrete implementations.
"""
