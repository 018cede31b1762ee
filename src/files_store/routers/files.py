import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from files_store.adapters.storage import BaseStore
from files_store.dependencies import get_store
from files_store.multipart import decode_upload
from files_store.schemas import FileMetadata, PutFileResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"description": "Malformed key or request body"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Storage backend failure"},
}


@router.post(
    "/",
    response_model=PutFileResponse,
    responses={
        **ERROR_RESPONSES,
        status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: {"description": "File type could not be detected"},
    },
)
async def put_file(request: Request, store: BaseStore = Depends(get_store)) -> PutFileResponse:
    """
    Upload a file.

    Expects a multipart/form-data body with the fields `name`, `owner` and
    `bytes`. Missing text fields default to an empty string; unknown fields
    are ignored.

    Returns:
        PutFileResponse: The key under which the file was stored
    """
    file_input = await decode_upload(request.headers.get("content-type"), request.stream())
    key = await run_in_threadpool(store.put, file_input)
    return PutFileResponse(id=key)


@router.get(
    "/{key}",
    response_class=StreamingResponse,
    responses={
        **ERROR_RESPONSES,
        status.HTTP_200_OK: {"content": {"application/octet-stream": {}}, "description": "The file content"},
        status.HTTP_404_NOT_FOUND: {"description": "No file stored under this key"},
    },
)
async def get_file(
    key: str = Path(..., description="The key returned by the upload"),
    store: BaseStore = Depends(get_store),
) -> StreamingResponse:
    """Stream the raw content of a stored file."""
    chunks = await run_in_threadpool(store.get, key)
    close = getattr(chunks, "close", None)
    # runs after the response finishes, also when the client went away before streaming began
    background = BackgroundTask(close) if close is not None else None
    return StreamingResponse(chunks, media_type="application/octet-stream", background=background)


@router.get("/{key}/info", response_model=Optional[FileMetadata], responses=ERROR_RESPONSES)
async def get_file_info(
    key: str = Path(..., description="The key returned by the upload"),
    store: BaseStore = Depends(get_store),
) -> Optional[FileMetadata]:
    """Return the metadata record of a stored file, or null when there is none."""
    return await run_in_threadpool(store.info, key)
