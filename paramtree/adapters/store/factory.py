"""Factory functions for store backends and their rate limiters."""

from paramtree.adapters.rate_limit.base import AbstractRateLimiter
from paramtree.adapters.rate_limit.sliding_window import SlidingWindowRateLimiter
from paramtree.adapters.store.base import AbstractParameterStore
from paramtree.adapters.store.local import LocalParameterStore
from paramtree.adapters.store.ssm import SSMParameterStore
from paramtree.core.config import StoreSettings, settings
from paramtree.core.errors import ValidationAppError


def create_parameter_store(store_settings: StoreSettings | None = None) -> AbstractParameterStore:
    """Instantiate the store backend selected in configuration.

    Args:
        store_settings: Optional store settings; defaults to global settings.

    Returns:
        AbstractParameterStore: Backend instance (not yet initialized).

    Raises:
        ValidationAppError: If the backend name is unknown.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "ssm":
        return SSMParameterStore(
            region=cfg.region,
            endpoint_url=cfg.endpoint_url,
            page_size=cfg.page_size,
        )

    if backend == "local":
        return LocalParameterStore(
            database_url=cfg.database_url,
            page_size=cfg.page_size,
        )

    raise ValidationAppError(
        code="store_unknown_backend",
        message=f"Unknown store backend: '{backend}'. Supported backends: ssm, local",
    )


def create_rate_limiter(store_settings: StoreSettings | None = None) -> AbstractRateLimiter:
    """Build the admission limiter for the configured backend."""
    cfg = store_settings or settings.store
    return SlidingWindowRateLimiter(cfg.effective_requests_per_second)
