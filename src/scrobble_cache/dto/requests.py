"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class CacheDeleteRequest(BaseModel):
    """Request DTO for invalidating a cached response."""

    url: str = Field(
        ...,
        description="Full URL of the cached request, e.g. https://host/api/lastfm/track-info?artist=Queen&track=Bohemian+Rhapsody",
        min_length=1,
    )
