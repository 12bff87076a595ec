"""Tagged failures raised by the rule layer.

Each error carries the HTTP status the API answers with and a short tag
used as the ``error`` field of JSON error bodies.
"""


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400
    tag = "error"
    default_message = "Request failed"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"error": self.tag, "message": self.message}


class ValidationError(DomainError):
    """Malformed input: out-of-range score, missing required field."""

    status_code = 400
    tag = "validation"
    default_message = "Invalid input"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401
    tag = "unauthorized"
    default_message = "Invalid email or password"


class NotFound(DomainError):
    status_code = 404
    tag = "not_found"
    default_message = "Not found"


class Forbidden(DomainError):
    """Authenticated, but lacking the role or ownership for the action."""

    status_code = 403
    tag = "forbidden"
    default_message = "You do not have permission to perform this action"


class Conflict(DomainError):
    """Uniqueness violation: duplicate code, number, enrollment or attendance day."""

    status_code = 409
    tag = "conflict"
    default_message = "Record already exists"
