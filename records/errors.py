"""
Error taxonomy for the records API.

Services raise these; the app factory maps every ``RecordsError`` to a JSON
response carrying its ``status_code``.
"""

from typing import Any, Dict


class RecordsError(Exception):
    """Base exception for all records errors"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Server error", code: str = None):
        self.message = message
        if code:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


class NotFoundError(RecordsError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(RecordsError):
    status_code = 409
    code = "CONFLICT"


class EmailInUseError(ConflictError):
    """Signup with an email that already belongs to a student"""

    status_code = 400
    code = "EMAIL_IN_USE"

    def __init__(self, message: str = "Email already in use"):
        super().__init__(message)


class ValidationError(RecordsError):
    status_code = 400
    code = "VALIDATION_ERROR"


class EmptyRegistrationError(ValidationError):
    code = "EMPTY_REGISTRATION"

    def __init__(self, message: str = "No courses to register"):
        super().__init__(message)


class AuthError(RecordsError):
    status_code = 401
    code = "AUTH_FAILED"


class StoreError(RecordsError):
    """A query or transaction failed; the unit of work was rolled back"""

    code = "STORE_ERROR"


class RenderError(RecordsError):
    """Transcript document could not be assembled"""

    code = "RENDER_ERROR"
