"""Process-wide token bucket rate limiter.

A single instance is constructed by the orchestrator and shared by every
worker thread, so the configured rate bounds the whole process rather than
each worker.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

# =============================================================================
# EXCEPTIONS
# =============================================================================


class RateLimitCancelled(Exception):
    """Raised when a caller stops waiting for a token (cancel signal or timeout)."""

    pass


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class TokenBucket:
    """Token bucket state.

    ``tokens`` goes negative when callers have reserved future tokens; the
    deficit is repaid by refill before any new caller is served.

    Attributes:
        tokens: Currently available tokens (may be negative).
        last_update: Clock reading of the last refill.
    """

    tokens: float
    last_update: float


# =============================================================================
# RATE LIMITER
# =============================================================================


class RateLimiter:
    """Thread-safe token bucket with blocking, cancellable acquisition.

    Each ``acquire`` reserves exactly one token under the lock and then
    sleeps, outside the lock, until its reserved slot comes due. Callers are
    therefore served in reservation order and no thundering herd forms when
    hundreds of workers wait at once. A reservation abandoned through the
    cancel signal is not refunded, which can only lower the effective rate.

    Attributes:
        rate: Steady rate in tokens per second.
        burst: Bucket capacity.
    """

    def __init__(
        self,
        requests_per_second: float,
        burst: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize a full bucket.

        Args:
            requests_per_second: Steady rate, must be positive.
            burst: Bucket capacity, at least 1.
            clock: Monotonic clock in seconds.

        Raises:
            ValueError: On a non-positive rate or a burst below 1.
        """
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be > 0")
        if burst < 1:
            raise ValueError("burst must be >= 1")

        self._rate = float(requests_per_second)
        self._burst = burst
        self._clock = clock
        self._bucket = TokenBucket(tokens=float(burst), last_update=clock())
        self._lock = threading.Lock()

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def burst(self) -> int:
        return self._burst

    def acquire(
        self,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> float:
        """Block until one request may be issued.

        Args:
            cancel: Event that aborts the wait when set.
            timeout: Maximum seconds to wait for the token.

        Returns:
            Clock reading at which the token was granted.

        Raises:
            RateLimitCancelled: If ``cancel`` is set before the token is due,
                or if the token cannot be granted within ``timeout``.
        """
        if cancel is not None and cancel.is_set():
            raise RateLimitCancelled("cancelled before acquiring a token")

        with self._lock:
            now = self._clock()
            self._refill(now)
            self._bucket.tokens -= 1.0
            wait_time = self._deficit_wait()
            if timeout is not None and wait_time > timeout:
                self._bucket.tokens += 1.0
                raise RateLimitCancelled(
                    f"no token available within {timeout:.2f}s (next in {wait_time:.2f}s)"
                )

        if wait_time > 0:
            if cancel is None:
                time.sleep(wait_time)
            elif cancel.wait(wait_time):
                raise RateLimitCancelled("cancelled while waiting for a token")

        return now + wait_time

    def available_tokens(self) -> float:
        """Return the current token count, negative when reservations are pending."""
        with self._lock:
            self._refill(self._clock())
            return self._bucket.tokens

    def _refill(self, now: float) -> None:
        """Refill tokens based on elapsed time, capped at the burst size."""
        elapsed = now - self._bucket.last_update
        if elapsed > 0:
            self._bucket.tokens = min(
                float(self._burst),
                self._bucket.tokens + elapsed * self._rate,
            )
            self._bucket.last_update = now

    def _deficit_wait(self) -> float:
        if self._bucket.tokens >= 0:
            return 0.0
        return -self._bucket.tokens / self._rate
