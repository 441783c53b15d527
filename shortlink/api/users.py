from fastapi import APIRouter, Depends, status
import logging

from shortlink.api.deps import get_user_service
from shortlink.schemas.user import TokenResponse, UserCreatedResponse, UserCredentialsRequest
from shortlink.services.users import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

@router.post("", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED)
def register_endpoint(body: UserCredentialsRequest, users: UserService = Depends(get_user_service)):
    credential = users.register(body.username, body.password)
    return UserCreatedResponse(username=credential.username)

@router.post("/login", response_model=TokenResponse)
def login_endpoint(body: UserCredentialsRequest, users: UserService = Depends(get_user_service)):
    return TokenResponse(token=users.login(body.username, body.password))
