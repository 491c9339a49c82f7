from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from shortener_app.services.url_service import URLService
from shortener_app.services.exceptions import (
    DatabaseError,
    InvalidShortCodeError,
    ShortCodeNotFoundError,
)
from shortener_app.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}")
def redirect_to_long_url(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    Malformed codes are reported as not found here: a visitor following a
    broken link gets the same answer either way.
    """
    try:
        long_url = url_service.resolve(short_code)
    except (ShortCodeNotFoundError, InvalidShortCodeError):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    except DatabaseError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not resolve short URL"
        )

    return RedirectResponse(url=long_url, status_code=status.HTTP_302_FOUND)
