"""Authentication binding for the HTTP surface.

Authentication itself happens upstream. The proxy in front of this service
verifies the caller and forwards their id and email in trusted headers.
"""

from dataclasses import dataclass

from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

USER_ID_HEADER = "HTTP_X_AUTHENTICATED_USER_ID"
EMAIL_HEADER = "HTTP_X_AUTHENTICATED_USER_EMAIL"


@dataclass(frozen=True)
class AuthenticatedCaller:
    """Request user for a caller the proxy vouched for."""

    user_id: str
    email: str
    is_authenticated: bool = True


class TrustedHeaderAuthentication(BaseAuthentication):
    """Build the request user from the proxy's identity headers."""

    def authenticate(self, request: Request) -> tuple[AuthenticatedCaller, None] | None:
        user_id = request.META.get(USER_ID_HEADER, "").strip()
        if not user_id:
            return None
        email = request.META.get(EMAIL_HEADER, "").strip()
        return AuthenticatedCaller(user_id=user_id, email=email), None

    def authenticate_header(self, request: Request) -> str:
        return 'TrustedHeader realm="api"'
