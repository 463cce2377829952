"""
Custom Exceptions.

Application-specific exception classes. Services raise these; the HTTP
layer maps them to status codes in exception_handlers.py.

Error kinds crossing the service boundary:
    PermissionDeniedError - requester lacks access, or the note is missing/deleted
    NotFoundError         - a referenced user or record genuinely does not exist
    ConflictError         - uniqueness violation (active email, active grant)
    DatabaseError         - unexpected storage failure, details withheld
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class PermissionDeniedError(ApplicationError):
    """
    Raised when the requester may not perform an operation on a note.

    Also raised when the note does not exist or is soft-deleted, so
    callers cannot probe for note existence.
    """

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
