"""Rate limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the storage backend can be swapped later with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class Decision(str, Enum):
    """Outcome of admitting a single request."""

    ALLOW = "allow"
    REJECT = "reject"


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit admission.

    Attributes:
        decision: Whether the request is admitted or rejected.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the client's current window ends.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    decision: Decision
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None = None

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOW


class AbstractRateLimiter(ABC):
    """Interface for per-client rate limiters."""

    @abstractmethod
    def admit(self, identity: str, now: float | None = None) -> RateLimitResult:
        """Record one request for ``identity`` and decide whether to admit it.

        Args:
            identity: Client identity (e.g., network address).
            now: UNIX time in seconds; defaults to the limiter's clock.

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError
