from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
import logging

from shortlink.api.deps import get_current_user, get_url_service
from shortlink.core.config import settings
from shortlink.schemas.url import URLCreateRequest, URLResponse, URLUpdateRequest
from shortlink.services.auth_gate import Identity
from shortlink.services.shortener import URLService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["urls"])

@router.post("/", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
def shorten_url_endpoint(
    body: URLCreateRequest,
    user: Identity = Depends(get_current_user),
    urls: URLService = Depends(get_url_service),
):
    mapping = urls.create_short_url(body.value, user.username)
    return URLResponse(id=mapping.code, value=mapping.target_url)

@router.get("/{short_code}", response_model=URLResponse)
def get_url_endpoint(
    short_code: str,
    user: Identity = Depends(get_current_user),
    urls: URLService = Depends(get_url_service),
):
    """Return the mapping as JSON. The status is 301 by default, but no Location header is sent."""
    mapping = urls.get_url(short_code, user.username)
    return JSONResponse(
        status_code=settings.RESOLVE_STATUS_CODE,
        content=URLResponse(id=mapping.code, value=mapping.target_url).model_dump(),
    )

@router.put("/{short_code}", response_model=URLResponse)
def update_url_endpoint(
    short_code: str,
    body: URLUpdateRequest,
    user: Identity = Depends(get_current_user),
    urls: URLService = Depends(get_url_service),
):
    mapping = urls.update_url(short_code, body.url, user.username)
    return URLResponse(id=mapping.code, value=mapping.target_url)

@router.delete("/{short_code}", status_code=status.HTTP_204_NO_CONTENT)
def delete_url_endpoint(
    short_code: str,
    user: Identity = Depends(get_current_user),
    urls: URLService = Depends(get_url_service),
):
    urls.delete_url(short_code, user.username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
