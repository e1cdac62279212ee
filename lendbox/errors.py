"""Error kinds raised by the borrow-request services.

The HTTP layer maps each kind to a status code through ``status_code``;
services never build responses themselves.
"""


class LendingError(Exception):
    status_code = 400
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


class NotFoundError(LendingError):
    """Item or request id does not resolve."""

    status_code = 404
    kind = "not_found"


class ValidationError(LendingError):
    """Client-correctable input problem (dates, message length, self-loan...)."""

    status_code = 400
    kind = "validation"


class AuthorizationError(LendingError):
    """Acting user does not hold the role the operation requires."""

    status_code = 403
    kind = "authorization"


class ConflictError(LendingError):
    """Request (or its item) is not in the state the operation requires."""

    status_code = 409
    kind = "conflict"
