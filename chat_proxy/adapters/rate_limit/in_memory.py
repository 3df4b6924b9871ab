"""In-memory fixed-window rate limiter.

Each client gets its own window, opened by the first request seen after the
previous window ended. Requests beyond the limit are rejected but still
counted, so flooding past the limit never shortens the window.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Expired windows are swept periodically; ``max_entries`` optionally bounds
  the number of tracked clients with least-recently-seen eviction.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from chat_proxy.adapters.rate_limit.base import AbstractRateLimiter, Decision, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class ClientWindowState:
    count: int
    window_end: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per client identity.

    Example:
        >>> limiter = InMemoryFixedWindowRateLimiter(limit=2, window_seconds=60)
        >>> [limiter.admit("10.0.0.1", now=0).allowed for _ in range(3)]
        [True, True, False]
        >>> limiter.admit("10.0.0.1", now=61).allowed
        True
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
        max_entries: int | None = None,
        sweep_interval_seconds: float | None = None,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admitted requests per window.
            window_seconds: Length of a client's window in seconds.
            clock: Time source returning UNIX time in seconds.
            max_entries: Optional cap on tracked identities.
            sweep_interval_seconds: Minimum time between sweeps of expired
                windows; defaults to ``window_seconds``.

        Raises:
            ValueError: If any numeric argument is invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        if sweep_interval_seconds is not None and sweep_interval_seconds <= 0:
            raise ValueError("sweep_interval_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._max_entries = max_entries
        self._sweep_interval = sweep_interval_seconds or window_seconds
        self._next_sweep_at: float | None = None
        self._lock = threading.RLock()
        self._state_by_identity: OrderedDict[str, ClientWindowState] = OrderedDict()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def __len__(self) -> int:
        return len(self._state_by_identity)

    def get_state(self, identity: str) -> ClientWindowState | None:
        """Return the tracked window for ``identity`` (for inspection only)."""
        return self._state_by_identity.get(identity)

    def admit(self, identity: str, now: float | None = None) -> RateLimitResult:
        """Count a request for ``identity`` and decide whether to admit it.

        Args:
            identity: Client identity (network address).
            now: UNIX time in seconds; defaults to the injected clock.

        Returns:
            RateLimitResult with the decision and window metadata.

        Raises:
            ValueError: If identity is empty.
        """
        if not identity:
            raise ValueError("identity must be a non-empty string")

        if now is None:
            now = self._clock()

        with self._lock:
            self._maybe_sweep_locked(now)

            state = self._state_by_identity.get(identity)
            if state is None or now > state.window_end:
                state = ClientWindowState(count=1, window_end=now + self._window_seconds)
                self._state_by_identity[identity] = state
            else:
                state.count += 1

            self._state_by_identity.move_to_end(identity)
            self._evict_if_over_capacity_locked()

            remaining = max(0, self._limit - state.count)
            reset_at = int(math.ceil(state.window_end))
            if state.count <= self._limit:
                return RateLimitResult(
                    decision=Decision.ALLOW,
                    limit=self._limit,
                    remaining=remaining,
                    reset_at=reset_at,
                )

            return RateLimitResult(
                decision=Decision.REJECT,
                limit=self._limit,
                remaining=0,
                reset_at=reset_at,
                retry_after_seconds=max(1, int(math.ceil(state.window_end - now))),
            )

    def sweep(self, now: float | None = None) -> int:
        """Drop every window that has already ended.

        Args:
            now: UNIX time in seconds; defaults to the injected clock.

        Returns:
            Number of identities removed.
        """
        if now is None:
            now = self._clock()
        with self._lock:
            return self._sweep_locked(now)

    def reset(self) -> None:
        """Forget all tracked clients."""
        with self._lock:
            self._state_by_identity.clear()
            self._next_sweep_at = None

    def _maybe_sweep_locked(self, now: float) -> None:
        if self._next_sweep_at is None:
            self._next_sweep_at = now + self._sweep_interval
            return
        if now >= self._next_sweep_at:
            self._sweep_locked(now)
            self._next_sweep_at = now + self._sweep_interval

    def _sweep_locked(self, now: float) -> int:
        expired = [
            identity
            for identity, state in self._state_by_identity.items()
            if now > state.window_end
        ]
        for identity in expired:
            del self._state_by_identity[identity]
        if expired:
            logger.debug(
                "rate_limit.swept",
                extra={"removed": len(expired), "tracked": len(self._state_by_identity)},
            )
        return len(expired)

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return
        while len(self._state_by_identity) > self._max_entries:
            # popitem(last=False) removes the least recently seen identity
            self._state_by_identity.popitem(last=False)
