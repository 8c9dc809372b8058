"""Rate limiting adapters.

This package keeps store calls under the admission rate a backend tolerates.
The orchestrator depends on the abstract limiter only, so tests and other
backends can supply their own implementation.
"""

from paramtree.adapters.rate_limit.base import AbstractRateLimiter
from paramtree.adapters.rate_limit.sliding_window import SlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "SlidingWindowRateLimiter",
]
