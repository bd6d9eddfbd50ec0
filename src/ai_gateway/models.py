from dataclasses import dataclass


@dataclass
class GatewayMetrics:
    """Track hit/miss and upstream counters for gateway calls."""

    total_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    coalesced_requests: int = 0
    upstream_calls: int = 0
    upstream_failures: int = 0
    total_upstream_time_ms: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_requests == 0:
            return 0.0
        return self.cache_hits / self.total_requests

    @property
    def avg_upstream_time_ms(self) -> float:
        """Calculate average upstream latency."""
        if self.upstream_calls == 0:
            return 0.0
        return self.total_upstream_time_ms / self.upstream_calls

    def record_hit(self) -> None:
        """Record a cache hit."""
        self.total_requests += 1
        self.cache_hits += 1

    def record_miss(self) -> None:
        """Record a cache miss."""
        self.total_requests += 1
        self.cache_misses += 1

    def record_coalesced(self) -> None:
        """Record a miss that joined an in-flight upstream call."""
        self.coalesced_requests += 1

    def record_upstream_call(self, duration_ms: float) -> None:
        """Record a successful upstream call."""
        self.upstream_calls += 1
        self.total_upstream_time_ms += duration_ms

    def record_upstream_failure(self) -> None:
        self.upstream_failures += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_requests": self.total_requests,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "coalesced_requests": self.coalesced_requests,
            "upstream_calls": self.upstream_calls,
            "upstream_failures": self.upstream_failures,
            "avg_upstream_time_ms": self.avg_upstream_time_ms,
        }
