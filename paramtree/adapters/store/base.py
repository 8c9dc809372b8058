"""Parameter store interfaces.

The orchestrator talks to every backend through these three primitives,
mirroring the subset of the SSM Parameter Store API the tool relies on:
put one parameter, delete a bounded batch, list one page under a path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

from paramtree.core.errors import StoreWriteError

# SSM DeleteParameters accepts at most ten names per call.
MAX_DELETE_BATCH = 10

STRING = "String"
SECURE_STRING = "SecureString"


@dataclass(frozen=True)
class ParameterRecord:
    """A single stored parameter.

    Attributes:
        name: Absolute parameter name, e.g. ``/cfg/db/port``.
        value: Stored value; for this tool always a JSON document.
        type: ``String`` or ``SecureString``.
        version: Backend version counter, bumped on every overwrite.
    """

    name: str
    value: str
    type: str = STRING
    version: int = 1


@dataclass(frozen=True)
class ParameterPage:
    """One page of a path listing.

    Attributes:
        records: Parameters on this page.
        next_token: Opaque continuation token, None once the listing is done.
    """

    records: list[ParameterRecord] = field(default_factory=list)
    next_token: str | None = None


def check_delete_batch(names: Sequence[str], *, backend: str) -> None:
    """Reject delete batches above the backend limit before any call is made."""
    if len(names) > MAX_DELETE_BATCH:
        raise StoreWriteError(
            code="delete_batch_too_large",
            message=(
                f"Cannot delete {len(names)} parameters in one call; "
                f"the limit is {MAX_DELETE_BATCH}"
            ),
            details={
                "batch_size": len(names),
                "max_batch_size": MAX_DELETE_BATCH,
                "backend": backend,
            },
        )


class AbstractParameterStore(ABC):
    """Interface for path-addressed parameter stores."""

    backend_name: str = "abstract"

    async def init(self) -> None:
        """Prepare backend resources (tables, connections). Default: nothing."""

    async def close(self) -> None:
        """Release backend resources. Default: nothing."""

    @abstractmethod
    async def put_parameter(
        self,
        name: str,
        value: str,
        *,
        overwrite: bool,
        secure: bool,
    ) -> None:
        """Create or replace a parameter.

        Args:
            name: Absolute parameter name.
            value: Serialized value to store.
            overwrite: Replace an existing parameter instead of failing.
            secure: Request encrypted storage (SecureString).

        Raises:
            StoreWriteError: If the backend rejects the write.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete_parameters(self, names: Sequence[str]) -> None:
        """Delete up to MAX_DELETE_BATCH parameters in one call.

        Names that do not exist are ignored.

        Raises:
            StoreWriteError: If the batch is too large or the backend fails.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_parameters_by_path(
        self,
        path: str,
        *,
        recursive: bool,
        with_decryption: bool,
        next_token: str | None = None,
    ) -> ParameterPage:
        """Fetch one page of parameters stored beneath ``path``.

        Args:
            path: Absolute path; only names strictly below it are returned.
            recursive: Include every depth, not only direct children.
            with_decryption: Return decrypted SecureString values.
            next_token: Token from the previous page, None for the first one.

        Returns:
            ParameterPage with records and the token for the next page.

        Raises:
            StoreReadError: If the backend rejects the listing.
        """
        raise NotImplementedError
