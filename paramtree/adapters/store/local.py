"""Embedded SQLite parameter store for offline development and tests.

Mirrors the SSM semantics the orchestrator depends on: names strictly below a
path, recursive or one-level listings, pages of at most ``page_size`` records
with an opaque continuation token, tolerant batch deletes capped at ten names.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import DateTime, Integer, String, Text, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

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


class Base(DeclarativeBase):
    """Declarative base for the local store tables."""


class ParameterRow(Base):
    __tablename__ = "parameters"

    name: Mapped[str] = mapped_column(String(2048), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default=STRING)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_record(self) -> ParameterRecord:
        return ParameterRecord(name=self.name, value=self.value, type=self.type, version=self.version)


def _build_engine(database_url: str) -> AsyncEngine:
    if ":memory:" in database_url or database_url.endswith("sqlite+aiosqlite://"):
        # One shared connection, otherwise every checkout sees an empty database.
        return create_async_engine(
            database_url,
            poolclass=StaticPool,
        )
    return create_async_engine(database_url)


class LocalParameterStore(AbstractParameterStore):
    """Parameter store persisted in SQLite through SQLAlchemy (aiosqlite)."""

    backend_name = "local"

    def __init__(self, *, database_url: str, page_size: int = 10) -> None:
        self.engine = _build_engine(database_url)
        self.page_size = page_size
        self._session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        # SQLite allows one writer; operations on the shared connection must not interleave.
        self._lock = asyncio.Lock()

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("local_store.ready", extra={"dialect": self.engine.dialect.name})

    async def close(self) -> None:
        await self.engine.dispose()

    async def put_parameter(
        self,
        name: str,
        value: str,
        *,
        overwrite: bool,
        secure: bool,
    ) -> None:
        param_type = SECURE_STRING if secure else STRING
        try:
            async with self._lock, self._session_factory() as session, session.begin():
                row = await session.get(ParameterRow, name)
                if row is None:
                    session.add(ParameterRow(name=name, value=value, type=param_type))
                elif not overwrite:
                    raise StoreWriteError(
                        code="parameter_already_exists",
                        message=f"Parameter {name} already exists and overwrite is disabled",
                        details={"name": name, "backend": self.backend_name},
                    )
                else:
                    row.value = value
                    row.type = param_type
                    row.version += 1
                    row.last_modified = datetime.now(timezone.utc)
        except SQLAlchemyError as exc:
            raise StoreWriteError(
                code="store_put_failed",
                message=f"Failed to write parameter {name}: {exc}",
                details={"name": name, "backend": self.backend_name},
            ) from exc
        logger.debug("local_store.put_parameter", extra={"parameter_name": name, "secure": secure})

    async def delete_parameters(self, names: Sequence[str]) -> None:
        check_delete_batch(names, backend=self.backend_name)
        if not names:
            return
        try:
            async with self._lock, self._session_factory() as session, session.begin():
                result = await session.execute(delete(ParameterRow).where(ParameterRow.name.in_(list(names))))
        except SQLAlchemyError as exc:
            raise StoreWriteError(
                code="store_delete_failed",
                message=f"Failed to delete {len(names)} parameter(s): {exc}",
                details={"batch_size": len(names), "backend": self.backend_name},
            ) from exc
        logger.debug(
            "local_store.delete_parameters",
            extra={"batch_size": len(names), "deleted_count": result.rowcount},
        )

    async def get_parameters_by_path(
        self,
        path: str,
        *,
        recursive: bool,
        with_decryption: bool,
        next_token: str | None = None,
    ) -> ParameterPage:
        # Values are stored in clear, so with_decryption has nothing to change.
        base = path.rstrip("/") + "/"
        # substr comparison instead of LIKE: SQLite LIKE ignores ASCII case.
        stmt = select(ParameterRow).where(func.substr(ParameterRow.name, 1, len(base)) == base)
        if not recursive:
            remainder = func.substr(ParameterRow.name, len(base) + 1)
            stmt = stmt.where(func.instr(remainder, "/") == 0)
        if next_token is not None:
            stmt = stmt.where(ParameterRow.name > next_token)
        # One extra row tells whether another page exists.
        stmt = stmt.order_by(ParameterRow.name).limit(self.page_size + 1)

        try:
            async with self._lock, self._session_factory() as session:
                rows = list((await session.scalars(stmt)).all())
        except SQLAlchemyError as exc:
            raise StoreReadError(
                code="store_list_failed",
                message=f"Failed to list parameters under {path}: {exc}",
                details={"path": path, "backend": self.backend_name},
            ) from exc

        page = rows[: self.page_size]
        token = page[-1].name if len(rows) > self.page_size else None
        return ParameterPage(records=[row.to_record() for row in page], next_token=token)
