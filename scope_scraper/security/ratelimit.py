"""Process-wide request rate limiting.

A single token bucket sized from the requests-per-minute ceiling: the
bucket holds N permits and refills one every 60s / N. The scrape loop
takes exactly one permit before each request.
"""

from aiolimiter import AsyncLimiter

from scope_scraper.errors import ConfigError, RateLimitError

WINDOW_SECONDS = 60.0  # requests_per_minute is measured over one minute


def new_limiter(requests_per_minute: int, period: float = WINDOW_SECONDS) -> AsyncLimiter:
    """Build the token bucket for a requests-per-minute ceiling.

    Args:
        requests_per_minute: Bucket capacity, and permits refilled per `period`.
        period: Refill window in seconds. Only tests shrink this.
    """
    if isinstance(requests_per_minute, bool) or not isinstance(requests_per_minute, int):
        raise ConfigError(f"requests per minute must be an integer, got {requests_per_minute!r}")
    if requests_per_minute <= 0:
        raise ConfigError(f"requests per minute must be positive, got {requests_per_minute}")
    return AsyncLimiter(max_rate=requests_per_minute, time_period=period)


async def wait_for_permit(limiter: AsyncLimiter, handle: str | None = None) -> None:
    """Block until one permit is available. No timeout.

    Cancellation propagates untouched so an interrupted run stays interrupted.
    """
    try:
        await limiter.acquire()
    except ValueError as e:
        raise RateLimitError(f"rate limiter refused permit: {e}", handle=handle) from e
