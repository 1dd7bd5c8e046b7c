"""Google Drive operations: upload into the configured folder, grant read access."""

import io
from collections.abc import Callable
from dataclasses import dataclass

from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from relay.core.credentials import CredentialStore
from relay.core.errors import Unauthorized, provider_errors
from relay.core.folders import resolve_folder
from relay.shared import Logger

logger = Logger(__name__).get_logger()

VIEW_LINK_TEMPLATE = "https://drive.google.com/file/d/{file_id}/view"
DEFAULT_MIME_TYPE = "application/octet-stream"


def build_drive_service(credentials):
    """Create a Google Drive API service client."""
    return build(
        "drive",
        "v3",
        credentials=credentials,
        cache_discovery=False,
    )


@dataclass(frozen=True)
class UploadRequest:
    content: bytes
    file_name: str
    mime_type: str | None = None


@dataclass(frozen=True)
class UploadedFile:
    id: str
    name: str
    view_link: str


class DriveGateway:
    def __init__(
        self,
        credentials: CredentialStore,
        folder_id: str,
        service_factory: Callable = build_drive_service,
    ):
        self.credentials = credentials
        self.folder_id = folder_id
        self._service_factory = service_factory

    def ensure_authorized(self):
        if not self.credentials.is_authorized():
            logger.warning("Refusing storage call: no usable %s credential", self.credentials.mode)
            raise Unauthorized("Not authorized with the storage provider. Visit /auth first.")

    def service(self):
        """Build a client, refusing when no usable credential is loaded."""
        self.ensure_authorized()
        return self._service_factory(self.credentials.google_credentials())

    def upload_file(self, upload: UploadRequest) -> UploadedFile:
        with provider_errors("Folder lookup"):
            service = self.service()
            parent_id = resolve_folder(service, self.folder_id)

        metadata = {"name": upload.file_name, "parents": [parent_id]}
        media = MediaIoBaseUpload(
            io.BytesIO(upload.content),
            mimetype=upload.mime_type or DEFAULT_MIME_TYPE,
            resumable=False,
        )

        with provider_errors("Upload"):
            created = (
                service.files()
                .create(
                    body=metadata,
                    media_body=media,
                    fields="id, name, webViewLink",
                    supportsAllDrives=True,
                )
                .execute()
            )

        file_id = created["id"]
        link = created.get("webViewLink")

        if not link:
            with provider_errors("Link lookup"):
                link = (
                    service.files()
                    .get(fileId=file_id, fields="webViewLink", supportsAllDrives=True)
                    .execute()
                    .get("webViewLink")
                )

        if not link:
            link = VIEW_LINK_TEMPLATE.format(file_id=file_id)

        logger.info(
            "Uploaded %s (%s bytes) into %s as %s",
            upload.file_name,
            len(upload.content),
            parent_id,
            file_id,
        )
        return UploadedFile(id=file_id, name=created.get("name") or upload.file_name, view_link=link)

    def grant_access(self, file_id: str, email: str, notify: bool = False) -> str | None:
        with provider_errors("Grant access"):
            service = self.service()

        permission = {
            "type": "user",
            "role": "reader",
            "emailAddress": email,
        }

        with provider_errors("Grant access"):
            created = (
                service.permissions()
                .create(
                    fileId=file_id,
                    body=permission,
                    fields="id",
                    sendNotificationEmail=notify,
                    supportsAllDrives=True,
                )
                .execute()
            )

        logger.info("Granted reader access on %s to %s", file_id, email)
        return created.get("id")
