from fakes import FakeFlow, issued
from fastapi.testclient import TestClient

from relay import main
from relay.core.context import build_context
from relay.core.credentials import DelegatedTokenStore, StaticSecretStore
from relay.main import create_app
from relay.shared import load_config
from relay.shared.config import ENV_OVERRIDES


def test_create_app_builds_its_own_context(monkeypatch):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(main, "config", load_config())

    client = TestClient(create_app())

    assert client.get("/health").json() == {"ok": True}
    assert client.get("/auth/status").json() == {"authorized": False, "mode": "delegated"}

    response = client.post("/upload", files={"file": ("a.txt", b"a", "text/plain")})
    assert response.status_code == 401


def test_build_context_without_token_store(test_config):
    context = build_context(test_config)

    assert isinstance(context.credentials, DelegatedTokenStore)
    assert context.credentials.vault is None
    assert context.drive.credentials is context.credentials
    assert context.drive.folder_id == "folder-123"


def test_build_context_with_database_token_store(test_config):
    drive = test_config.drive.model_copy(update={"token_store": "database"})
    config = test_config.model_copy(update={"drive": drive})

    context = build_context(config)
    context.credentials._flow_factory = lambda: FakeFlow(credentials=issued())
    context.credentials.complete_authorization("code")

    assert context.credentials.vault.read().refresh_token == "refresh-2"


def test_build_context_in_static_mode(test_config):
    drive = test_config.drive.model_copy(update={"credential_mode": "static"})
    config = test_config.model_copy(update={"drive": drive})

    context = build_context(config)

    assert isinstance(context.credentials, StaticSecretStore)
    assert context.credentials.is_authorized() is False
