from pydantic import BaseModel
from typing import Optional

# Request DTOs
# Missing fields are rejected by UserService, not here
class UserCredentialsRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

# Response DTOs
class UserCreatedResponse(BaseModel):
    username: str

class TokenResponse(BaseModel):
    token: str
