"""Tests for the token bucket and RateLimitedDataProvider."""

from channel_sync.config import RateLimitConfig, TokenBucketConfig
from channel_sync.data.rate_limit import RateLimitedDataProvider, TokenBucket
from channel_sync.errors import SYNC_RATE_LIMIT_EXCEEDED, AppError, Err
from conftest import FakeClock, make_inner


def _limits(**buckets: TokenBucketConfig) -> RateLimitConfig:
    return RateLimitConfig(**buckets)


def _channel_limit(capacity: float, tokens_per_second: float) -> RateLimitConfig:
    return _limits(get_channel_stats=TokenBucketConfig(capacity=capacity, tokens_per_second=tokens_per_second))


class TestTokenBucket:
    def test_starts_full(self, clock: FakeClock) -> None:
        bucket = TokenBucket(3, 0, now=clock)
        assert bucket.tokens == 3
        assert [bucket.try_acquire() for _ in range(4)] == [True, True, True, False]

    def test_never_exceeds_capacity(self, clock: FakeClock) -> None:
        bucket = TokenBucket(2, 10, now=clock)
        clock.advance(60_000)
        bucket.try_acquire()
        assert bucket.tokens == 1

    def test_fractional_refill_accumulates(self, clock: FakeClock) -> None:
        bucket = TokenBucket(1, 2, now=clock)
        assert bucket.try_acquire()
        clock.advance(250)
        assert not bucket.try_acquire()
        assert bucket.tokens == 0.5
        clock.advance(250)
        assert bucket.try_acquire()


class TestRateLimitedProvider:
    def test_allows_within_capacity(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(make_inner(), limits=_channel_limit(2, 0), now=clock)
        assert limited.get_channel_stats("UC-001").ok
        assert limited.get_channel_stats("UC-001").ok

    def test_blocks_beyond_capacity_without_calling_inner(self, clock: FakeClock) -> None:
        inner = make_inner()
        limited = RateLimitedDataProvider(inner, limits=_channel_limit(1, 0), now=clock)
        assert limited.get_channel_stats("UC-001").ok
        second = limited.get_channel_stats("UC-001")
        assert not second.ok
        assert second.error.code == SYNC_RATE_LIMIT_EXCEEDED
        assert inner.get_channel_stats.call_count == 1

    def test_refills_over_time(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(make_inner(), limits=_channel_limit(1, 1), now=clock)
        assert limited.get_channel_stats("UC-001").ok
        assert not limited.get_channel_stats("UC-001").ok
        clock.advance(1500)
        assert limited.get_channel_stats("UC-001").ok

    def test_caps_refill_at_capacity(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(make_inner(), limits=_channel_limit(2, 10), now=clock)
        clock.advance(10_000)
        assert limited.get_channel_stats("UC-001").ok
        assert limited.get_channel_stats("UC-001").ok
        assert not limited.get_channel_stats("UC-001").ok

    def test_independent_endpoints(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(
            make_inner(),
            limits=_limits(
                get_channel_stats=TokenBucketConfig(capacity=1, tokens_per_second=0),
                get_video_stats=TokenBucketConfig(capacity=2, tokens_per_second=0),
            ),
            now=clock,
        )
        assert limited.get_channel_stats("UC-001").ok
        assert not limited.get_channel_stats("UC-001").ok
        assert limited.get_video_stats(["VID-001"]).ok
        assert limited.get_video_stats(["VID-002"]).ok
        assert limited.get_recent_videos("UC-001", limit=5).ok

    def test_default_limits(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(make_inner(), now=clock)
        successes = sum(1 for i in range(25) if limited.get_channel_stats(f"UC-{i:03d}").ok)
        assert successes == 20

    def test_partial_override_keeps_default_rate(self) -> None:
        cfg = RateLimitConfig.model_validate({"get_channel_stats": {"capacity": 3}})
        assert cfg.get_channel_stats.capacity == 3
        assert cfg.get_channel_stats.tokens_per_second == 5
        assert cfg.get_video_stats.capacity == 20

    def test_preserves_metadata(self) -> None:
        limited = RateLimitedDataProvider(make_inner("original-provider", requires_auth=True))
        assert limited.name == "original-provider:rate-limited"
        assert limited.configured is True
        assert limited.requires_auth is True

    def test_error_context(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(make_inner(), limits=_channel_limit(1, 0), now=clock)
        limited.get_channel_stats("UC-001")
        result = limited.get_channel_stats("UC-002")
        assert not result.ok
        assert result.error.severity == "warning"
        assert result.error.context["endpoint"] == "get_channel_stats"
        assert "UC-002" in result.error.context["query"]

    def test_fractional_refill(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(make_inner(), limits=_channel_limit(10, 2), now=clock)
        for i in range(10):
            assert limited.get_channel_stats(f"UC-00{i}").ok
        clock.advance(250)
        assert not limited.get_channel_stats("UC-PARTIAL").ok
        clock.advance(250)
        assert limited.get_channel_stats("UC-AFTER").ok

    def test_inner_errors_pass_through(self, clock: FakeClock) -> None:
        inner = make_inner()
        failure = Err(AppError.create("TEST_ERROR", "boom"))
        inner.get_video_stats.return_value = failure
        limited = RateLimitedDataProvider(inner, now=clock)
        assert limited.get_video_stats(["VID-001"]) is failure

    def test_available_tokens_per_endpoint(self, clock: FakeClock) -> None:
        limited = RateLimitedDataProvider(make_inner(), limits=_channel_limit(3, 0), now=clock)
        assert limited.available_tokens("get_channel_stats") == 3
        limited.get_channel_stats("UC-001")
        limited.get_channel_stats("UC-002")
        assert limited.available_tokens("get_channel_stats") == 1
        assert limited.available_tokens("get_video_stats") == 20
