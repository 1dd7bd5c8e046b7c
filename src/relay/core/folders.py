from dataclasses import dataclass
from enum import StrEnum

from googleapiclient.errors import HttpError

from relay.core.errors import (
    ConfigurationError,
    FolderNotFound,
    InvalidTarget,
    http_error_message,
)
from relay.shared import Logger

logger = Logger(__name__).get_logger()

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
SHORTCUT_MIME_TYPE = "application/vnd.google-apps.shortcut"

METADATA_FIELDS = "id,name,mimeType,shortcutDetails(targetId,targetMimeType)"


class Kind(StrEnum):
    DIRECTORY = "directory"
    SHORTCUT = "shortcut"
    OTHER = "other"


@dataclass(frozen=True)
class DirectoryReference:
    id: str
    kind: Kind
    name: str | None = None
    shortcut_target: str | None = None

    @classmethod
    def from_metadata(cls, metadata: dict) -> "DirectoryReference":
        mime_type = metadata.get("mimeType")
        if mime_type == FOLDER_MIME_TYPE:
            kind = Kind.DIRECTORY
        elif mime_type == SHORTCUT_MIME_TYPE:
            kind = Kind.SHORTCUT
        else:
            kind = Kind.OTHER

        details = metadata.get("shortcutDetails") or {}
        return cls(
            id=metadata["id"],
            kind=kind,
            name=metadata.get("name"),
            shortcut_target=details.get("targetId"),
        )


def fetch_reference(service, file_id: str) -> DirectoryReference:
    try:
        metadata = (
            service.files()
            .get(fileId=file_id, fields=METADATA_FIELDS, supportsAllDrives=True)
            .execute()
        )
    except HttpError as e:
        message = http_error_message(e)
        logger.warning("Could not read folder %s: %s", file_id, message)
        raise FolderNotFound(f"Folder {file_id} is not accessible: {message}") from e

    return DirectoryReference.from_metadata(metadata)


def resolve_folder(service, folder_id: str) -> str:
    """
    Resolve ``folder_id`` to the id of a real folder.

    A shortcut is followed exactly once and its target must be a folder.
    Shortcuts pointing at shortcuts are rejected rather than followed.

    Raises:
        ConfigurationError: no folder id configured.
        FolderNotFound: the folder or the shortcut target can't be read.
        InvalidTarget: the resolved object is not a folder.
    """
    if not folder_id:
        raise ConfigurationError("DRIVE_FOLDER_ID is not configured")

    reference = fetch_reference(service, folder_id)

    if reference.shortcut_target:
        target = fetch_reference(service, reference.shortcut_target)
        if target.kind is not Kind.DIRECTORY:
            raise InvalidTarget(
                f"Shortcut {folder_id} points to {target.id}, which is not a folder"
            )
        logger.debug("Followed shortcut %s -> %s", folder_id, target.id)
        return target.id

    if reference.kind is not Kind.DIRECTORY:
        raise InvalidTarget(f"{folder_id} is not a folder")

    return folder_id
