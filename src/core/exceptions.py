"""Custom exception classes for Campus Events.

This module defines the application-specific error taxonomy. Callers map
these kinds to protocol-level responses; none of them is retried.
"""


class CampusEventsError(Exception):
    """Base exception for all Campus Events errors."""

    pass


class NotFoundError(CampusEventsError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id):
        """Initialize the exception.

        Args:
            entity: Kind of entity, e.g. 'Event' or 'RSO'.
            entity_id: The ID that was looked up.
        """
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class ForbiddenError(CampusEventsError):
    """Raised when a visibility, role or ownership check fails."""

    pass


class ConflictError(CampusEventsError):
    """Raised when the request conflicts with the current state."""

    pass


class AlreadyMemberError(ConflictError):
    """Raised when a user joins an RSO they already belong to."""

    def __init__(self, user_id: int, rso_id: int):
        self.user_id = user_id
        self.rso_id = rso_id
        super().__init__(f"User '{user_id}' is already a member of RSO '{rso_id}'")


class NotAMemberError(ConflictError):
    """Raised when a user leaves an RSO they do not belong to."""

    def __init__(self, user_id: int, rso_id: int):
        self.user_id = user_id
        self.rso_id = rso_id
        super().__init__(f"User '{user_id}' is not a member of RSO '{rso_id}'")


class UnresolvedReferenceError(NotFoundError, ConflictError):
    """Raised when an event variant's type-specific reference cannot resolve."""

    pass


class CascadeIntegrityError(CampusEventsError):
    """Raised when a multi-step deletion fails partway and was rolled back."""

    def __init__(self, operation: str, entity_id, reason: str = ""):
        """Initialize the exception.

        Args:
            operation: Name of the cascade, e.g. 'delete_college'.
            entity_id: ID of the root entity being deleted.
            reason: Optional description of the failed step.
        """
        self.operation = operation
        self.entity_id = entity_id
        self.reason = reason
        message = f"{operation}({entity_id}) failed and was rolled back"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ValidationError(CampusEventsError):
    """Raised when data validation fails."""

    pass
