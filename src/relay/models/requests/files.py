from .serde_base import SerdeBase


class GrantAccessRequest(SerdeBase):
    # Optional here so missing fields surface as our own 400
    file_id: str | None = None
    email: str | None = None
    notify: bool = False


class GrantAccessResponse(SerdeBase):
    success: bool
    message: str


class UploadFileResponse(SerdeBase):
    id: str
    name: str
    view_link: str
