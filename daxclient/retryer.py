"""Equal-jitter backoff for throttled DAX requests."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from daxclient.errors import DaxRequestFailure, ServiceError

DEFAULT_BASE_RETRY_DELAY = 0.070
DEFAULT_MAX_BACKOFF_DELAY = 20.0

_THROTTLE_CODES = frozenset(
    {
        "ProvisionedThroughputExceededException",
        "ThrottledException",
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "RequestThrottled",
        "RequestThrottledException",
        "TooManyRequestsException",
        "PriorRequestNotComplete",
        "TransactionInProgressException",
        "EC2ThrottledException",
    }
)


def is_throttle_error(error: Optional[BaseException]) -> bool:
    """True when the error's code marks it as a throttling error."""
    return isinstance(error, ServiceError) and error.code in _THROTTLE_CODES


def is_auth_required(codes: Sequence[int]) -> bool:
    """True for the code sequence 4.23.31.33 (authentication required)."""
    return tuple(codes) == (4, 23, 31, 33)


@dataclass
class DaxRetryer:
    """Backoff policy for throttled requests; delays are in seconds (0 means default)."""

    base_throttle_delay: float = DEFAULT_BASE_RETRY_DELAY
    max_backoff_delay: float = DEFAULT_MAX_BACKOFF_DELAY
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def retry_delay(self, error: Optional[BaseException], retry_count: int) -> float:
        """Seconds to wait before the next attempt; 0 unless the error is a throttle."""
        if not is_throttle_error(error):
            return 0.0
        base = self.base_throttle_delay or DEFAULT_BASE_RETRY_DELAY
        cap = self.max_backoff_delay or DEFAULT_MAX_BACKOFF_DELAY
        min_delay = min((1 << retry_count) * base, cap)
        half = min_delay / 2
        return half + self.rng.uniform(0.0, half)

    def should_retry(self, error: Optional[BaseException]) -> bool:
        """True for retryable or recoverable failures, throttles and auth-required errors."""
        codes: tuple[int, ...] = ()
        if isinstance(error, DaxRequestFailure):
            codes = error.code_sequence
        return (
            (bool(codes) and codes[0] in (1, 2))
            or is_throttle_error(error)
            or is_auth_required(codes)
        )

    def max_retries(self) -> int:
        """The retryer itself adds no retries."""
        return 0


__all__ = ["DaxRetryer", "is_auth_required", "is_throttle_error"]