from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from ..core.errors import ErrorOut
from ..core.settings import Settings, get_settings
from ..deps import get_completion_client
from ..schemas import SummarizeRequest, SummaryOut
from ..services.summarize import CompletionClient, summarize_transcript

router = APIRouter(prefix="/api", tags=["summaries"])


@router.post(
    "/summarize",
    response_model=SummaryOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
def summarize(
    payload: SummarizeRequest,
    settings: Settings = Depends(get_settings),
    client: Optional[CompletionClient] = Depends(get_completion_client),
):
    summary = summarize_transcript(
        payload.transcript,
        payload.custom_instructions,
        settings=settings,
        client=client,
    )
    return SummaryOut(summary=summary)
