from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from file_store import FileStore
from uploads_api.dependencies import get_store
from uploads_api.schemas import HealthResponse

router = APIRouter()


@router.get("/")
async def root():
    return {"data": "server is running", "status": 200}


@router.get("/health", response_model=HealthResponse)
async def health_check(store: FileStore = Depends(get_store)):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of the API and the document store.
    """
    health_status = {
        "status": "ok",
        "components": {
            "api": "ready",
            "database": "ready"
        },
        "ready": False
    }

    if not await run_in_threadpool(store.ping):
        health_status["components"]["database"] = "unreachable"
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )
    return health_status
