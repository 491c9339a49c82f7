from pydantic import BaseModel, Field, computed_field, ConfigDict
from typing import Optional
from datetime import datetime
from shortener_app.config import settings


class URLBase(BaseModel):
    # Plain str: only emptiness and length are checked, in the service
    long_url: str = Field(..., description="The original URL to be shortened")


class URLCreate(URLBase):
    pass


class URLResponse(URLBase):
    """Response schema built from a stored Mapping

    - from_attributes=True reads straight from the Mapping model
    - @computed_field adds the public short URL
    """
    short_code: str
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def short_url(self) -> str:
        """Computed field - automatically generated from short_code"""
        return f"{settings.base_url.rstrip('/')}/{self.short_code}"

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)
