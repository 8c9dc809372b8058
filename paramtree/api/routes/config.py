import json
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from paramtree.api.dependencies import get_parameter_tree
from paramtree.schemas.config import DeleteConfigResponse, WriteConfigResponse
from paramtree.services.parameter_tree import ParameterTree
from paramtree.utils.path_codec import name_to_path, path_to_name

router = APIRouter(tags=["Config"])


class SortedJSONResponse(JSONResponse):
    """JSON response with sorted keys so identical trees render identically."""

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=2,
            sort_keys=True,
        ).encode("utf-8")


@router.get("/config/{prefix:path}", response_class=SortedJSONResponse)
async def read_config(
    prefix: str,
    parameter_tree: Annotated[ParameterTree, Depends(get_parameter_tree)],
) -> SortedJSONResponse:
    """Read every parameter under a prefix back into a config tree.

    Args:
        prefix: Root path, e.g. ``myapp`` or ``env/prod/myapp``.

    Returns:
        SortedJSONResponse: The rebuilt tree with deterministically ordered keys.

    Raises:
        MalformedPathError: 400 if the prefix has empty components.
        StoreReadError: 502 if the store rejects a listing.
    """
    tree = await parameter_tree.read(prefix)
    return SortedJSONResponse(content=tree)


@router.put("/config/{prefix:path}", response_model=WriteConfigResponse)
async def write_config(
    prefix: str,
    tree: Annotated[dict[str, Any] | list[Any], Body(description="Parsed config tree (object or array).")],
    parameter_tree: Annotated[ParameterTree, Depends(get_parameter_tree)],
) -> WriteConfigResponse:
    """Store a config tree under a prefix.

    Leaves whose value is an empty string remove the matching parameter.
    Writes are not atomic; on a 502 some leaves may already be stored.

    Returns:
        WriteConfigResponse: Names written and names removed.
    """
    summary = await parameter_tree.write(prefix, tree)
    return WriteConfigResponse(
        prefix=path_to_name(name_to_path(prefix)),
        written=summary.written,
        deleted=summary.deleted,
    )


@router.delete("/config/{prefix:path}", response_model=DeleteConfigResponse)
async def delete_config(
    prefix: str,
    parameter_tree: Annotated[ParameterTree, Depends(get_parameter_tree)],
) -> DeleteConfigResponse:
    """Delete every parameter under a prefix, ten names per store call."""
    deleted = await parameter_tree.delete(prefix)
    return DeleteConfigResponse(prefix=path_to_name(name_to_path(prefix)), deleted=deleted)
