from __future__ import annotations


class CRMError(Exception):
    """Base class for domain errors raised by the service layer."""


class EntityNotFoundError(CRMError):
    """Raised when an id does not resolve to a live (not soft-deleted) row."""

    def __init__(self, entity: str, entity_id: int | str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found.")


class InvalidCredentialsError(CRMError):
    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)
