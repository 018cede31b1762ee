from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from files_store.dependencies import get_app_store

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of the API and the storage backend.
    """
    health_status = {
        "status": "ok",
        "components": {
            "api": "ready",
            "store": "initializing",
        },
        "ready": False,
    }

    try:
        store = get_app_store(request.app)
        reachable = await run_in_threadpool(store.ping)
        health_status["components"]["store"] = "ready" if reachable else "unreachable"
    except Exception as e:
        health_status["components"]["store"] = f"error: {str(e)}"

    if health_status["components"]["store"] != "ready":
        health_status["status"] = "degraded"

    health_status["ready"] = all(
        state == "ready" for state in health_status["components"].values()
    )
    return health_status
