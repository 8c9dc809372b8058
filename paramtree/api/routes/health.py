from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint.

    Returns a simple status response to verify the API is operational.
    Used by load balancers and monitoring systems to determine service health.

    Returns:
        dict: "status" set to "ok" and the backend the running app was built with.
    """

    store = request.app.state.parameter_tree.store
    return {"status": "ok", "store_backend": store.backend_name}
