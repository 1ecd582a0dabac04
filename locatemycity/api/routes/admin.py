"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health  -- simple health check
GET /api/v1/admin/dataset -- size and origin of the loaded place snapshot
"""

from fastapi import APIRouter, Request

from locatemycity.api.middleware import limiter, rate_limit
from locatemycity.api.schemas import DatasetStatusResponse, HealthResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()


@router.get(
    "/dataset",
    response_model=DatasetStatusResponse,
    summary="Loaded dataset status",
)
@limiter.limit(rate_limit)
async def dataset_status(request: Request):
    snapshot = getattr(request.app.state, "snapshot", None)
    if snapshot is None:
        return DatasetStatusResponse(loaded=False)
    return DatasetStatusResponse(
        loaded=True,
        source=snapshot.source,
        places=len(snapshot),
        skipped=snapshot.skipped,
        loaded_at=snapshot.loaded_at,
    )
