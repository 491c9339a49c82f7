from fastapi import APIRouter, Depends, HTTPException, status
from shortener_app.schemas.url import URLCreate, URLResponse
from shortener_app.services.url_service import URLService
from shortener_app.services.exceptions import (
    DatabaseError,
    InvalidShortCodeError,
    ShortCodeExistsError,
    ShortCodeGenerationError,
    ShortCodeNotFoundError,
    URLValidationError,
)
from shortener_app.dependencies import get_url_service

router = APIRouter(prefix="/urls", tags=["urls"])


@router.post("/", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
def create_short_url(
    url_data: URLCreate,
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL

    The response is built from the created code and the trimmed URL, the
    mapping is not read back after the insert.
    """
    try:
        long_url = url_service.validate(url_data.long_url)
        short_code = url_service.create_short(long_url)
    except URLValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    except ShortCodeExistsError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not allocate a unique short code, try again"
        )
    except (ShortCodeGenerationError, DatabaseError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create short URL"
        )

    return URLResponse(short_code=short_code, long_url=long_url)


@router.get("/{short_code}", response_model=URLResponse)
def get_url_info(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get information about a short URL"""
    try:
        return url_service.get_mapping(short_code)
    except ShortCodeNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )
    except InvalidShortCodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except DatabaseError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not read short URL"
        )
