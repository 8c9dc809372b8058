"""Pydantic schemas for config tree API responses."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class WriteConfigResponse(BaseModel):
    """Outcome of storing a config tree under a prefix."""

    prefix: str = Field(..., description="Normalized parameter path the tree was stored under.")
    written: List[str] = Field(
        default_factory=list,
        description="Parameter names created or overwritten.",
    )
    deleted: List[str] = Field(
        default_factory=list,
        description="Parameter names removed because their value was an empty string.",
    )


class DeleteConfigResponse(BaseModel):
    """Outcome of deleting every parameter under a prefix."""

    prefix: str = Field(..., description="Normalized parameter path that was cleared.")
    deleted: int = Field(..., description="Number of parameters submitted for deletion.")
