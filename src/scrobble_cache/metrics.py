from dataclasses import dataclass


@dataclass
class CacheMetrics:
    """Track hit/miss counters for the response cache."""

    cache_hits: int = 0
    cache_misses: int = 0
    stores: int = 0
    errors: int = 0

    @property
    def total_lookups(self) -> int:
        """Total number of cache lookups."""
        return self.cache_hits + self.cache_misses

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_lookups == 0:
            return 0.0
        return self.cache_hits / self.total_lookups

    def record_hit(self) -> None:
        """Record a cache hit."""
        self.cache_hits += 1

    def record_miss(self) -> None:
        """Record a cache miss."""
        self.cache_misses += 1

    def record_store(self) -> None:
        """Record a successful cache write."""
        self.stores += 1

    def record_error(self) -> None:
        """Record a swallowed backend failure."""
        self.errors += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_lookups": self.total_lookups,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "stores": self.stores,
            "errors": self.errors,
        }
