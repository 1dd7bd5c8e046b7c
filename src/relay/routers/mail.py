from typing import Annotated

from fastapi import APIRouter, Depends

from relay.core.context import ServiceContext, get_context
from relay.core.errors import ValidationError
from relay.models.requests import SendEmailRequest, SendEmailResponse
from relay.shared import Logger

logger = Logger(__name__).get_logger()

router = APIRouter()


@router.post("/send-email", response_model=SendEmailResponse)
async def send_email(
    data: SendEmailRequest,
    ctx: Annotated[ServiceContext, Depends(get_context)],
):
    if not data.to or not data.template:
        raise ValidationError("to and template are required")

    message_id = await ctx.mailer.send(data.to, data.template, data.vars)
    return SendEmailResponse(ok=True, message_id=message_id)
