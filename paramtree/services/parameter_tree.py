"""Parameter tree service mapping config trees onto a flat parameter store.

This service is the core business logic of the project. It handles:
- Flattening a config tree into one put (or delete) per leaf
- Reading every parameter under a prefix, page by page, back into a tree
- Deleting every parameter under a prefix in batches the store accepts
- Routing every store call through the rate limiter

Writes and deletes are not atomic: when one leaf or batch fails the others
still take effect, and the first failure is re-raised once all have settled.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from paramtree.adapters.rate_limit.base import AbstractRateLimiter
from paramtree.adapters.store.base import MAX_DELETE_BATCH, AbstractParameterStore, ParameterRecord
from paramtree.core.errors import DecodeError, MalformedPathError, ValidationAppError
from paramtree.utils.path_codec import (
    DELETE_SENTINEL,
    ParameterPath,
    flatten,
    name_to_path,
    path_to_name,
    treeify,
)

logger = logging.getLogger(__name__)


@dataclass
class WriteSummary:
    """Names touched by a write call."""

    written: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)


def _encode_value(name: str, value: Any) -> str:
    try:
        return json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise ValidationAppError(
            code="leaf_not_json",
            message=f"Value of {name} has no JSON representation",
            details={"name": name},
        ) from exc


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def _decode_value(record: ParameterRecord) -> Any:
    try:
        return json.loads(record.value, parse_constant=_reject_constant)
    except ValueError as exc:
        raise DecodeError(
            code="parameter_not_json",
            message=f"Stored value of {record.name} is not valid JSON",
            details={"name": record.name},
        ) from exc


async def _settle(operations: list[Awaitable[Any]]) -> list[Any]:
    """Await all operations, then raise the first failure if any occurred."""
    results = await asyncio.gather(*operations, return_exceptions=True)
    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        logger.warning(
            "parameter_tree.partial_failure",
            extra={"failed": len(failures), "total": len(results)},
        )
        raise failures[0]
    return results


class ParameterTree:
    """Reads, writes and deletes config trees stored under a path prefix."""

    def __init__(
        self,
        store: AbstractParameterStore,
        limiter: AbstractRateLimiter,
        *,
        secure: bool = False,
    ) -> None:
        """Initialize the service with its collaborators.

        Args:
            store: Backend implementing the three store primitives.
            limiter: Limiter every store call is admitted through.
            secure: Store values as SecureString.
        """
        self.store = store
        self.limiter = limiter
        self.secure = secure

    def _root(self, prefix: str) -> ParameterPath:
        return name_to_path(prefix)

    def _admit(self, operation: Callable[[], Awaitable[Any]]) -> Awaitable[Any]:
        return self.limiter.admit(operation)

    def _put_leaf(self, name: str, serialized: str | None) -> Awaitable[Any]:
        if serialized is None:
            logger.debug("parameter_tree.remove_leaf", extra={"parameter_name": name})
            # delete_parameters tolerates names that do not exist
            return self._admit(lambda: self.store.delete_parameters([name]))

        logger.debug("parameter_tree.write_leaf", extra={"parameter_name": name})
        return self._admit(
            lambda: self.store.put_parameter(name, serialized, overwrite=True, secure=self.secure)
        )

    async def _get_all_parameters(self, path: str, *, with_decryption: bool) -> list[ParameterRecord]:
        records: list[ParameterRecord] = []
        token: str | None = None
        page_number = 0
        while True:
            page_number += 1
            logger.debug(
                "parameter_tree.list_page",
                extra={"path": path, "page": page_number},
            )
            page = await self._admit(
                lambda token=token: self.store.get_parameters_by_path(
                    path,
                    recursive=True,
                    with_decryption=with_decryption,
                    next_token=token,
                )
            )
            records.extend(page.records)
            token = page.next_token
            if token is None:
                return records

    async def write(self, prefix: str, tree: Mapping[str, Any] | list[Any]) -> WriteSummary:
        """Store every leaf of ``tree`` under ``/{prefix}``.

        Empty-string leaves delete the matching parameter instead of storing
        it. All leaves are submitted together through the limiter.

        Args:
            prefix: Root path of the subtree, e.g. ``"myapp"`` or ``"env/prod"``.
            tree: Mapping or sequence to store.

        Returns:
            WriteSummary listing the names put and the names deleted.

        Raises:
            ValidationAppError: If ``tree`` is a bare scalar or a leaf has no
                JSON form (NaN, infinities); nothing is stored in that case.
            MalformedPathError: If the prefix or a key is not a valid component.
            StoreWriteError: If any put or delete failed (others still applied).
        """
        if not isinstance(tree, (Mapping, list, tuple)):
            raise ValidationAppError(
                code="config_root_not_container",
                message="Config root must be an object or an array",
            )

        root = self._root(prefix)
        summary = WriteSummary()
        # Encode everything first so a bad leaf fails before any store call.
        leaves: list[tuple[str, str | None]] = []
        for path, value in flatten(tree, root):
            name = path_to_name(path)
            if value == DELETE_SENTINEL:
                summary.deleted.append(name)
                leaves.append((name, None))
            else:
                summary.written.append(name)
                leaves.append((name, _encode_value(name, value)))

        operations = [self._put_leaf(name, serialized) for name, serialized in leaves]

        await _settle(operations)
        logger.info(
            "parameter_tree.write",
            extra={
                "prefix": path_to_name(root),
                "written_count": len(summary.written),
                "deleted_count": len(summary.deleted),
            },
        )
        return summary

    async def read(self, prefix: str) -> dict[str, Any] | list[Any]:
        """Load every parameter under ``/{prefix}`` and rebuild the tree.

        Records that are not JSON or whose names do not form a valid path
        below the prefix are logged and skipped. Index-keyed levels come back
        as lists, the root included (see ``treeify``).

        Raises:
            MalformedPathError: If the prefix itself is invalid.
            StoreReadError: If a listing call fails.
        """
        root_name = path_to_name(self._root(prefix))
        records = await self._get_all_parameters(root_name, with_decryption=True)

        pairs: list[tuple[ParameterPath, Any]] = []
        skipped = 0
        for record in records:
            if not record.name.startswith(root_name + "/"):
                skipped += 1
                logger.warning(
                    "parameter_tree.skip_foreign_record",
                    extra={"parameter_name": record.name, "prefix": root_name},
                )
                continue
            try:
                path = name_to_path(record.name[len(root_name):])
                pairs.append((path, _decode_value(record)))
            except (DecodeError, MalformedPathError) as exc:
                skipped += 1
                logger.warning(
                    "parameter_tree.skip_record",
                    extra={"parameter_name": record.name, "reason": exc.code},
                )

        logger.info(
            "parameter_tree.read",
            extra={"prefix": root_name, "record_count": len(records), "skipped_count": skipped},
        )
        return treeify(pairs)

    async def delete(self, prefix: str) -> int:
        """Delete every parameter under ``/{prefix}``.

        Names are deleted in batches of at most MAX_DELETE_BATCH, all batches
        submitted together through the limiter.

        Returns:
            Number of parameter names submitted for deletion.

        Raises:
            MalformedPathError: If the prefix is invalid.
            StoreReadError: If a listing call fails.
            StoreWriteError: If any batch failed (others still applied).
        """
        root_name = path_to_name(self._root(prefix))
        records = await self._get_all_parameters(root_name, with_decryption=False)
        names = [record.name for record in records]

        operations = []
        for start in range(0, len(names), MAX_DELETE_BATCH):
            batch = names[start:start + MAX_DELETE_BATCH]
            logger.debug(
                "parameter_tree.delete_batch",
                extra={"prefix": root_name, "first": start + 1, "last": start + len(batch), "total": len(names)},
            )
            operations.append(self._admit(lambda batch=batch: self.store.delete_parameters(batch)))

        await _settle(operations)
        logger.info("parameter_tree.delete", extra={"prefix": root_name, "deleted_count": len(names)})
        return len(names)
