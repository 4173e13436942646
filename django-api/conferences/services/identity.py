"""Identity adapter: turns an authenticated caller into a core Identity."""

from typing import Protocol

from conferences.domain import Identity
from conferences.domain.errors import UnauthorizedError


class Caller(Protocol):
    """Anything the transport hands us as the request's user."""

    is_authenticated: bool
    user_id: str
    email: str


def identity_of(caller: Caller | None) -> Identity:
    """Return the caller's identity.

    Raises:
        UnauthorizedError: If there is no authenticated caller.
    """
    if caller is None or not getattr(caller, "is_authenticated", False):
        raise UnauthorizedError()
    user_id = getattr(caller, "user_id", None)
    if not user_id:
        raise UnauthorizedError()
    return Identity(user_id=user_id, email=getattr(caller, "email", "") or "")
