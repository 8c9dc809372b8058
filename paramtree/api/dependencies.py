"""FastAPI dependencies shared by the API routes."""

from __future__ import annotations

from fastapi import Request

from paramtree.services.parameter_tree import ParameterTree


def get_parameter_tree(request: Request) -> ParameterTree:
    """Return the ParameterTree built during application startup."""
    return request.app.state.parameter_tree
