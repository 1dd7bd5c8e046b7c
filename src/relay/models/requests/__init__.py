from .files import GrantAccessRequest, GrantAccessResponse, UploadFileResponse
from .mail import SendEmailRequest, SendEmailResponse
from .payments import CreateOrderRequest
from .serde_base import SerdeBase

__all__ = [
    "CreateOrderRequest",
    "GrantAccessRequest",
    "GrantAccessResponse",
    "SendEmailRequest",
    "SendEmailResponse",
    "SerdeBase",
    "UploadFileResponse",
]
