# re-export common schemas for simpler imports
from .url import URLCreateRequest, URLUpdateRequest, URLResponse
from .user import UserCredentialsRequest, UserCreatedResponse, TokenResponse

__all__ = [
    "URLCreateRequest",
    "URLUpdateRequest",
    "URLResponse",
    "UserCredentialsRequest",
    "UserCreatedResponse",
    "TokenResponse",
]
