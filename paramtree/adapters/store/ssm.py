"""AWS Systems Manager Parameter Store adapter.

Uses the official boto3 SDK. boto3 clients are blocking, so each call runs in
a worker thread via asyncio.to_thread to keep the event loop free while the
rate limiter schedules other requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from paramtree.adapters.store.base import (
    SECURE_STRING,
    STRING,
    AbstractParameterStore,
    ParameterPage,
    ParameterRecord,
    check_delete_batch,
)
from paramtree.core.errors import StoreReadError, StoreWriteError

logger = logging.getLogger(__name__)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "ClientError")
    return type(exc).__name__


class SSMParameterStore(AbstractParameterStore):
    """Parameter store backed by AWS SSM.

    Credentials and default region come from the usual boto3 chain; nothing
    here handles them directly.
    """

    backend_name = "ssm"

    def __init__(
        self,
        *,
        region: str | None = None,
        endpoint_url: str | None = None,
        page_size: int = 10,
        client: Any | None = None,
    ) -> None:
        """Initialize the SSM client.

        Args:
            region: AWS region name; None uses the boto3 default.
            endpoint_url: Custom endpoint (e.g. LocalStack).
            page_size: MaxResults per GetParametersByPath call (1-10).
            client: Pre-built boto3 SSM client, mainly for tests.
        """
        self.client = client or boto3.client(
            "ssm",
            region_name=region,
            endpoint_url=endpoint_url,
        )
        self.page_size = page_size

    async def put_parameter(
        self,
        name: str,
        value: str,
        *,
        overwrite: bool,
        secure: bool,
    ) -> None:
        logger.debug("ssm.put_parameter", extra={"parameter_name": name, "secure": secure})
        try:
            await asyncio.to_thread(
                self.client.put_parameter,
                Name=name,
                Value=value,
                Overwrite=overwrite,
                Type=SECURE_STRING if secure else STRING,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StoreWriteError(
                code="store_put_failed",
                message=f"Failed to write parameter {name}: {exc}",
                details={"name": name, "backend": self.backend_name, "backend_code": _error_code(exc)},
            ) from exc

    async def delete_parameters(self, names: Sequence[str]) -> None:
        check_delete_batch(names, backend=self.backend_name)
        if not names:
            return
        try:
            response = await asyncio.to_thread(
                self.client.delete_parameters,
                Names=list(names),
            )
        except (ClientError, BotoCoreError) as exc:
            raise StoreWriteError(
                code="store_delete_failed",
                message=f"Failed to delete {len(names)} parameter(s): {exc}",
                details={"batch_size": len(names), "backend": self.backend_name, "backend_code": _error_code(exc)},
            ) from exc

        missing = response.get("InvalidParameters") or []
        logger.debug(
            "ssm.delete_parameters",
            extra={"batch_size": len(names), "missing_count": len(missing)},
        )

    async def get_parameters_by_path(
        self,
        path: str,
        *,
        recursive: bool,
        with_decryption: bool,
        next_token: str | None = None,
    ) -> ParameterPage:
        request: dict[str, Any] = {
            "Path": path,
            "Recursive": recursive,
            "WithDecryption": with_decryption,
            "MaxResults": self.page_size,
        }
        if next_token is not None:
            request["NextToken"] = next_token

        try:
            response = await asyncio.to_thread(self.client.get_parameters_by_path, **request)
        except (ClientError, BotoCoreError) as exc:
            raise StoreReadError(
                code="store_list_failed",
                message=f"Failed to list parameters under {path}: {exc}",
                details={"path": path, "backend": self.backend_name, "backend_code": _error_code(exc)},
            ) from exc

        records = [
            ParameterRecord(
                name=item["Name"],
                value=item["Value"],
                type=item.get("Type", STRING),
                version=item.get("Version", 1),
            )
            for item in response.get("Parameters", [])
        ]
        return ParameterPage(records=records, next_token=response.get("NextToken") or None)
