import logging
import time
from contextlib import asynccontextmanager
from textwrap import dedent

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.routing import APIRoute

from files_store.adapters.storage import BaseStore
from files_store.config.settings import Settings
from files_store.dependencies import get_app_store
from files_store.errors import (
    StorageError,
    handle_broad_exceptions,
    handle_storage_errors,
)
from files_store.logging_config import setup_logging
from files_store.routers.files import router as files_router
from files_store.routers.health import router as health_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_app_store(app)
    await run_in_threadpool(store.init_indexes)
    yield
    if app.state.owns_store:
        store.close()


def create_app(settings: Settings | None = None, store: BaseStore | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Files Store",
        summary="Store files with owner metadata",
        version="v1",
        description=dedent(
            """\
        Upload a file as `multipart/form-data` with the fields `name`, `owner` and `bytes`,
        then fetch its content with `GET /{key}` or its metadata with `GET /{key}/info`.
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    # stores handed in by the caller are closed by the caller
    app.state.owns_store = store is None

    app.include_router(health_router, tags=["health"])
    app.include_router(files_router, tags=["files"])

    app.add_exception_handler(
        exc_class_or_status_code=StorageError,
        handler=handle_storage_errors,
    )
    app.middleware("http")(handle_broad_exceptions)
    app.middleware("http")(log_requests)

    return app


async def log_requests(request: Request, call_next):
    """Log one access line per request."""
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        '%s "%s %s" %d %.1fms',
        request.client.host if request.client else "-",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
