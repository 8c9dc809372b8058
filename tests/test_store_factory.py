"""Tests for backend selection and configuration defaults."""

from unittest.mock import patch

import pytest

from paramtree.adapters.rate_limit.sliding_window import SlidingWindowRateLimiter
from paramtree.adapters.store.factory import create_parameter_store, create_rate_limiter
from paramtree.adapters.store.local import LocalParameterStore
from paramtree.adapters.store.ssm import SSMParameterStore
from paramtree.core.config import StoreSettings


def test_local_backend_defaults() -> None:
    cfg = StoreSettings(backend="local", database_url="sqlite+aiosqlite:///:memory:")

    store = create_parameter_store(cfg)
    limiter = create_rate_limiter(cfg)

    assert isinstance(store, LocalParameterStore)
    assert isinstance(limiter, SlidingWindowRateLimiter)
    assert limiter.requests_per_second == 1000
    assert cfg.effective_secure is False


def test_ssm_backend_defaults() -> None:
    cfg = StoreSettings(backend="ssm", region="eu-west-1", page_size=5)

    with patch("paramtree.adapters.store.ssm.boto3.client") as client_factory:
        store = create_parameter_store(cfg)

    client_factory.assert_called_once_with("ssm", region_name="eu-west-1", endpoint_url=None)
    assert isinstance(store, SSMParameterStore)
    assert store.page_size == 5
    assert create_rate_limiter(cfg).requests_per_second == 3
    assert cfg.effective_secure is True


def test_explicit_overrides_win() -> None:
    cfg = StoreSettings(backend="ssm", requests_per_second=8, secure=False)

    assert create_rate_limiter(cfg).requests_per_second == 8
    assert cfg.effective_secure is False


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORE_BACKEND", "ssm")
    monkeypatch.setenv("STORE_REQUESTS_PER_SECOND", "2")
    monkeypatch.setenv("STORE_ENDPOINT_URL", "http://localhost:4566")

    cfg = StoreSettings()

    assert cfg.backend == "ssm"
    assert cfg.effective_requests_per_second == 2
    assert cfg.endpoint_url == "http://localhost:4566"


@pytest.mark.parametrize("page_size", [0, 11])
def test_page_size_is_bounded(page_size: int) -> None:
    with pytest.raises(ValueError):
        StoreSettings(page_size=page_size)
