"""Error taxonomy shared by stores, services and the HTTP layer.

Every error is terminal for the request that raised it. The HTTP layer
renders ``status_code`` and ``detail`` directly.
"""
from fastapi import status


class ShortenerError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal server error"

    def __init__(self, detail: str = None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class ValidationError(ShortenerError):
    """Malformed URL or missing field."""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid request"


class ConflictError(ShortenerError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Username already taken"


class AuthenticationError(ShortenerError):
    """Missing or malformed token."""
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"


class InvalidCredentialsError(AuthenticationError):
    # login failures answer 403, not 401
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class AuthorizationError(ShortenerError):
    """Token was readable but cannot be trusted."""
    status_code = status.HTTP_403_FORBIDDEN
    detail = "Forbidden"


class NotFoundOrDenied(AuthorizationError):
    """The code does not exist or belongs to someone else.

    Both cases share this one type and message so nothing downstream can
    tell them apart.
    """
    status_code = status.HTTP_404_NOT_FOUND
    detail = "ID not found or access denied"

    def __init__(self):
        super().__init__()


class CodeSpaceExhaustedError(ShortenerError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Could not allocate a free short code"
