"""Command center service exceptions.

Every failure a service can report maps to exactly one HTTP status; the API
layer converts them in a single exception handler.
"""

from typing import Optional


class CommandCenterError(Exception):
    """Base exception for request-terminal service errors."""

    status_code: int = 500

    def __init__(self, message: str, code: str = "COMMAND_CENTER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class UnauthenticatedError(CommandCenterError):
    """No resolvable identity accompanied the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, code="UNAUTHENTICATED")


class NoWorkspaceError(CommandCenterError):
    """The caller is authenticated but belongs to no (matching) workspace.

    UI paths treat this as the onboarding state rather than a failure.
    """

    status_code = 404

    def __init__(self, message: str = "No workspace found"):
        super().__init__(message=message, code="NO_WORKSPACE")


class EntityNotFoundError(CommandCenterError):
    """Requested entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: object | None = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message=f"{entity} not found", code="NOT_FOUND")


class ForbiddenError(CommandCenterError):
    """Entity exists but lives outside the caller's workspace."""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message=message, code="FORBIDDEN")


class InvalidPayloadError(CommandCenterError):
    """Malformed or missing input, reported against a single field."""

    status_code = 400

    def __init__(self, field: Optional[str], message: str):
        self.field = field
        super().__init__(message=message, code="VALIDATION_ERROR")


class StorageFailureError(CommandCenterError):
    """Unexpected datastore failure. The message is safe to show to callers."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message=message, code="STORAGE_FAILURE")
