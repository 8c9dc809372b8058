"""Rate limiter interfaces.

Store adapters and the orchestrator depend on this abstraction (not the
concrete implementation) so the admission strategy can be swapped without
touching callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")


class AbstractRateLimiter(ABC):
    """Interface for limiters that gate asynchronous operations."""

    @abstractmethod
    async def admit(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` once the limiter has capacity for it.

        Args:
            operation: Zero-argument callable returning an awaitable. It is
                only called once admitted.

        Returns:
            Whatever the awaited operation returns. Exceptions raised by the
            operation propagate unchanged.
        """
        raise NotImplementedError
