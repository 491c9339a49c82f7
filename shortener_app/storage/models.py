"""
Data models returned by the persistence port.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Mapping(BaseModel):
    """A stored long/short pair. Immutable once created."""

    short_code: str = Field(..., description="Unique 8 character short code")
    long_url: str = Field(..., description="The original URL, stored as given")
    created_at: Optional[datetime] = Field(None, description="When the mapping was stored")

    # Reads straight from SQLAlchemy URL rows
    model_config = ConfigDict(from_attributes=True, frozen=True)
