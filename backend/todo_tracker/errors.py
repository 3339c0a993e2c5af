from typing import Any, Dict


class TodoTrackerError(Exception):
    """Base error carrying the HTTP status and the message shown to clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(TodoTrackerError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(TodoTrackerError):
    status_code = 400
    default_message = "Username or email already exists"


class AuthError(TodoTrackerError):
    status_code = 401
    default_message = "Invalid credentials"


class MissingTokenError(AuthError):
    default_message = "Access token required"


class InvalidTokenError(AuthError):
    status_code = 403
    default_message = "Invalid token"


class NotFoundError(TodoTrackerError):
    status_code = 404
    default_message = "Not found"


class InternalError(TodoTrackerError):
    status_code = 500
    default_message = "Database error"
