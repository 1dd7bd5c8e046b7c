from typing import Any

from .serde_base import SerdeBase


class SendEmailRequest(SerdeBase):
    to: str | None = None
    template: str | None = None
    vars: dict[str, Any] = {}


class SendEmailResponse(SerdeBase):
    ok: bool
    message_id: str
