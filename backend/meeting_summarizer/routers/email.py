from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from ..core.errors import ErrorOut
from ..core.settings import Settings, get_settings
from ..deps import get_email_transport
from ..schemas import EmailSentOut, SendEmailRequest
from ..services.emailer import EmailTransport, send_summary_email

router = APIRouter(prefix="/api", tags=["email"])


@router.post(
    "/send-email",
    response_model=EmailSentOut,
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)
def send_email(
    payload: SendEmailRequest,
    settings: Settings = Depends(get_settings),
    transport: Optional[EmailTransport] = Depends(get_email_transport),
):
    provider, message_id = send_summary_email(
        payload.to,
        payload.subject,
        payload.summary,
        settings=settings,
        transport=transport,
    )
    return EmailSentOut(id=message_id, provider=provider)
