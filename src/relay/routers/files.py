from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from relay.core.context import ServiceContext, get_context
from relay.core.drive import UploadRequest
from relay.core.errors import ValidationError
from relay.models.requests import GrantAccessRequest, GrantAccessResponse, UploadFileResponse
from relay.shared import Logger

logger = Logger(__name__).get_logger()

router = APIRouter()


async def read_bounded(file: UploadFile, max_size: int) -> bytes:
    """Read at most ``max_size`` bytes, rejecting anything larger."""
    content = await file.read(max_size + 1)
    if len(content) > max_size:
        raise ValidationError(f"File exceeds the maximum size of {max_size} bytes")
    return content


@router.post("/upload", response_model=UploadFileResponse)
async def upload_file(
    ctx: Annotated[ServiceContext, Depends(get_context)],
    file: Annotated[UploadFile | None, File()] = None,
    name: Annotated[str | None, Form()] = None,
    desired_file_name: Annotated[str | None, Form(alias="desiredFileName")] = None,
):
    """
    Upload one file into the configured Drive folder.

    Multipart form:
    - file: the payload
    - name (or desiredFileName): optional display name override
    """
    if file is None:
        raise ValidationError("No file uploaded.")

    try:
        # Fail before reading the body when no credential is loaded
        ctx.drive.ensure_authorized()

        content = await read_bounded(file, ctx.config.files.max_file_size)
        if not content:
            raise ValidationError("Uploaded file is empty.")

        file_name = name or desired_file_name or file.filename or "upload"
        logger.debug("Uploading %s (%s bytes)", file_name, len(content))

        uploaded = await run_in_threadpool(
            ctx.drive.upload_file,
            UploadRequest(content=content, file_name=file_name, mime_type=file.content_type),
        )
    finally:
        await file.close()

    return UploadFileResponse(id=uploaded.id, name=uploaded.name, view_link=uploaded.view_link)


@router.post("/grant-access", response_model=GrantAccessResponse)
def grant_access(
    data: GrantAccessRequest,
    ctx: Annotated[ServiceContext, Depends(get_context)],
):
    if not data.file_id or not data.email:
        raise ValidationError("fileId and email are required")

    logger.debug("Granting %s access to %s", data.email, data.file_id)
    ctx.drive.grant_access(data.file_id, data.email, notify=data.notify)

    return GrantAccessResponse(success=True, message=f"Access granted to {data.email}")
