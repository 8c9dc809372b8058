"""Parameter store adapters - one interface, several backends."""

from paramtree.adapters.store.base import (
    MAX_DELETE_BATCH,
    AbstractParameterStore,
    ParameterPage,
    ParameterRecord,
)
from paramtree.adapters.store.factory import create_parameter_store, create_rate_limiter
from paramtree.adapters.store.local import LocalParameterStore
from paramtree.adapters.store.ssm import SSMParameterStore

__all__ = [
    "MAX_DELETE_BATCH",
    "AbstractParameterStore",
    "LocalParameterStore",
    "ParameterPage",
    "ParameterRecord",
    "SSMParameterStore",
    "create_parameter_store",
    "create_rate_limiter",
]
