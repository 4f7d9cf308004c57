"""Typed service errors mapped to HTTP responses at the API boundary."""

from enum import Enum


class ErrorType(Enum):
    """Error kinds with their HTTP status and stable error code."""

    BAD_REQUEST = (400, "BAD_REQUEST")
    UNAUTHORIZED = (401, "UNAUTHORIZED")
    FORBIDDEN = (403, "FORBIDDEN")
    NOT_FOUND = (404, "NOT_FOUND")
    CONFLICT = (409, "CONFLICT")
    INTERNAL_SERVER_ERROR = (500, "INTERNAL_SERVER_ERROR")

    @property
    def status(self) -> int:
        return self.value[0]

    @property
    def code(self) -> str:
        return self.value[1]


class ServiceError(Exception):
    """Business-rule or infrastructure failure carrying a user-facing message.

    The message is built from a ``%s`` template and its arguments, e.g.
    ``ServiceError(ErrorType.NOT_FOUND, MSG_USER_NOT_FOUND, user_id)``.
    """

    def __init__(self, error_type: ErrorType, template: str, *args: object):
        self.error_type = error_type
        self.message = template % args if args else template
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.error_type.status

    @property
    def code(self) -> str:
        return self.error_type.code


class TokenError(Exception):
    """A token failed structural, cryptographic or expiry validation."""
