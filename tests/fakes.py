import json
from datetime import datetime
from types import SimpleNamespace

import httplib2
from googleapiclient.errors import HttpError

FOLDER = "application/vnd.google-apps.folder"
SHORTCUT = "application/vnd.google-apps.shortcut"


def http_error(status: int, message: str) -> HttpError:
    content = json.dumps({"error": {"code": status, "message": message}}).encode()
    return HttpError(httplib2.Response({"status": status}), content)


def folder(file_id: str, name: str = "Uploads") -> dict:
    return {"id": file_id, "name": name, "mimeType": FOLDER}


def shortcut(file_id: str, target_id: str, target_mime: str = FOLDER) -> dict:
    return {
        "id": file_id,
        "name": "Shortcut",
        "mimeType": SHORTCUT,
        "shortcutDetails": {"targetId": target_id, "targetMimeType": target_mime},
    }


class ExecuteResult:
    def __init__(self, payload=None, error=None):
        self.payload = payload or {}
        self.error = error

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.payload


class FakeFilesResource:
    def __init__(self, metadata=None, create_response=None, link_response=None, create_error=None):
        self.metadata = metadata or {}
        self.create_response = create_response or {}
        self.link_response = link_response or {}
        self.create_error = create_error

        self.get_calls = []
        self.create_calls = []

    def get(self, **kwargs):
        self.get_calls.append(kwargs)
        if kwargs.get("fields") == "webViewLink":
            return ExecuteResult(self.link_response)

        entry = self.metadata.get(kwargs["fileId"])
        if entry is None:
            return ExecuteResult(error=http_error(404, f"File not found: {kwargs['fileId']}."))
        if isinstance(entry, Exception):
            return ExecuteResult(error=entry)
        return ExecuteResult(entry)

    def create(self, **kwargs):
        self.create_calls.append(kwargs)
        return ExecuteResult(self.create_response, error=self.create_error)


class FakePermissionsResource:
    def __init__(self, create_response=None, create_error=None):
        self.create_response = create_response or {"id": "perm-1"}
        self.create_error = create_error
        self.create_calls = []

    def create(self, **kwargs):
        self.create_calls.append(kwargs)
        return ExecuteResult(self.create_response, error=self.create_error)


class FakeService:
    def __init__(self, files_resource=None, permissions_resource=None):
        self._files_resource = files_resource or FakeFilesResource()
        self._permissions_resource = permissions_resource or FakePermissionsResource()

    def files(self):
        return self._files_resource

    def permissions(self):
        return self._permissions_resource


class FakeServiceFactory:
    """Stands in for build_drive_service and counts how often it is used."""

    def __init__(self, service):
        self.service = service
        self.calls = 0

    def __call__(self, credentials):
        self.calls += 1
        return self.service


class FakeOrders:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def create(self, data):
        self.calls.append(data)
        if self.error is not None:
            raise self.error
        return self.response or {
            "id": "order_1",
            "entity": "order",
            "amount": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
        }


class FakeRazorpayClient:
    def __init__(self, orders=None):
        self.order = orders or FakeOrders()


class FakeSender:
    """Async stand-in for aiosmtplib.send."""

    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def __call__(self, message, **kwargs):
        self.calls.append((message, kwargs))
        if self.error is not None:
            raise self.error
        return {}, "OK"


class FakeFlow:
    """Stands in for google_auth_oauthlib's Flow."""

    def __init__(self, credentials=None, error=None):
        self.credentials = credentials
        self.error = error
        self.authorization_kwargs = None
        self.fetched_codes = []

    def authorization_url(self, **kwargs):
        self.authorization_kwargs = kwargs
        return "https://accounts.google.com/o/oauth2/auth?client_id=client-id", "state-1"

    def fetch_token(self, code):
        self.fetched_codes.append(code)
        if self.error is not None:
            raise self.error


def issued(token="access-2", refresh_token="refresh-2"):
    """Credentials as Flow.credentials exposes them after an exchange."""
    return SimpleNamespace(token=token, refresh_token=refresh_token, expiry=datetime(2030, 1, 1))
