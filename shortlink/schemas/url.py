from pydantic import BaseModel
from typing import Optional

# Request DTOs
class URLCreateRequest(BaseModel):
    value: Optional[str] = None

class URLUpdateRequest(BaseModel):
    url: Optional[str] = None

# Response DTOs
class URLResponse(BaseModel):
    # 'id' is the short code
    id: str
    value: str
