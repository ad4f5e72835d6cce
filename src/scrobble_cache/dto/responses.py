"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned for upstream failures and throttled requests."""

    error: str = Field(..., description="Human-readable error message")


class CacheDeleteResponse(BaseModel):
    """Response DTO for cache invalidation."""

    deleted: bool = Field(..., description="Whether an entry existed and was removed")
    key: str = Field(..., description="The canonical cache key that was looked up")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache and rate limit statistics."""

    backend: str = Field(..., description="Cache backend in use: 'memory' or 'redis'")
    total_entries: int = Field(..., description="Stored entries, -1 if the backend is unreachable", ge=-1)
    metrics: dict[str, float | int] = Field(default_factory=dict, description="Hit/miss counters")
    ttl_seconds: dict[str, int] = Field(default_factory=dict, description="TTL per cache category")
    rate_limit: dict[str, int] = Field(default_factory=dict, description="Rate limiter configuration and state")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
