"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
Internal logic uses entities from the entities package.
"""

from .requests import CacheDeleteRequest
from .responses import (
    CacheDeleteResponse,
    CacheStatsResponse,
    ErrorResponse,
    HealthCheckResponse,
)

__all__ = [
    "CacheDeleteRequest",
    "CacheDeleteResponse",
    "CacheStatsResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
