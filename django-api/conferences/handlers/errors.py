"""Map domain errors to HTTP responses.

Installed as the REST framework ``EXCEPTION_HANDLER``. Responses carry the
error code and the user-safe message only.
"""

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from conferences.domain.errors import DomainError, ErrorCode

STATUS_BY_CODE = {
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        return Response(
            {"code": exc.code.value, "message": exc.message},
            status=STATUS_BY_CODE[exc.code],
        )
    if isinstance(exc, ValidationError):
        return Response(
            {
                "code": ErrorCode.INVALID_ARGUMENT.value,
                "message": "Invalid request body",
                "details": exc.detail,
            },
            status=status.HTTP_400_BAD_REQUEST,
        )
    return exception_handler(exc, context)
