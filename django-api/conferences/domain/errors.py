"""Domain error codes for the conferences module."""

from dataclasses import dataclass
from enum import Enum

AUTHORIZATION_REQUIRED_MESSAGE = "Authorization Required!"


class ErrorCode(Enum):
    """Domain error codes."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class UnauthorizedError(DomainError):
    """Raised when no authenticated caller is present."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UNAUTHORIZED,
            message=AUTHORIZATION_REQUIRED_MESSAGE,
        )


class ForbiddenError(DomainError):
    """Raised when the caller may not modify the target entity."""

    def __init__(self, message: str = "Only the organizer can modify this conference") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class InvalidArgumentError(DomainError):
    """Raised when a form or a seat delta fails validation."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_ARGUMENT, message=message)


class InvalidWebsafeKeyError(InvalidArgumentError):
    """Raised when a web-safe key cannot be decoded."""

    def __init__(self, websafe_key: str) -> None:
        super().__init__("Invalid conference key format")
        self.websafe_key = websafe_key


class ProfileNotFoundError(DomainError):
    """Raised when the caller has no profile yet."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message="Profile not found",
        )
        self.user_id = user_id


class ConferenceNotFoundError(DomainError):
    """Raised when a conference is not found."""

    def __init__(self, websafe_key: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message="Conference not found",
        )
        self.websafe_key = websafe_key


class ConflictError(DomainError):
    """Raised when a transaction keeps losing to concurrent writers."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONFLICT,
            message="Too much contention, please retry",
        )


class InternalError(DomainError):
    """Raised when the store fails unexpectedly."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INTERNAL,
            message="Internal error",
        )
