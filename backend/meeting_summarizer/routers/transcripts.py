from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from ..core.errors import ErrorOut
from ..core.settings import Settings, get_settings
from ..schemas import TranscriptOut
from ..services.extraction import check_upload_size, extract_transcript

router = APIRouter(prefix="/api", tags=["transcripts"])


@router.post(
    "/upload-transcript",
    response_model=TranscriptOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
async def upload_transcript(
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_settings),
):
    if file is None:
        text = extract_transcript(None, None)
    else:
        # size is known once the multipart body is spooled
        if file.filename and file.size is not None:
            check_upload_size(file.size, settings.MAX_UPLOAD_BYTES)
        data = await file.read()
        # pdf/docx parsing is blocking; keep it off the event loop
        text = await run_in_threadpool(
            extract_transcript,
            file.filename,
            data,
            max_bytes=settings.MAX_UPLOAD_BYTES,
        )
    return TranscriptOut(text=text)
