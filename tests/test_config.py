from logging import DEBUG, INFO
from pathlib import Path

import pytest
from pydantic import ValidationError

from relay.shared.config import apply_env_overrides, load_config

TEST_CONFIG = Path(__file__).parent / "config.toml"


def test_loads_test_config():
    config = load_config(TEST_CONFIG)

    assert config.drive.credential_mode == "delegated"
    assert config.drive.folder_id == "folder-123"
    assert config.logging.level == DEBUG
    assert "welcome" in config.mail.templates


def test_defaults_without_config_file(tmp_path):
    config = load_config(tmp_path / "missing.toml")

    assert config.drive.credential_mode == "static"
    assert config.drive.folder_id == ""
    assert config.files.max_file_size == 25 * 1024 * 1024
    assert config.logging.level == INFO


def test_environment_overrides_file(monkeypatch):
    monkeypatch.setenv("DRIVE_FOLDER_ID", "from-env")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("ALLOWED_ORIGIN", "https://a.example, https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "warning")

    config = load_config(TEST_CONFIG)

    assert config.drive.folder_id == "from-env"
    assert config.network.port == 8080
    assert config.network.allowed_origins == ["https://a.example", "https://b.example"]
    assert config.logging.level == 30


def test_empty_environment_values_are_ignored():
    data = apply_env_overrides({"drive": {"folder_id": "kept"}}, environ={"DRIVE_FOLDER_ID": ""})

    assert data["drive"]["folder_id"] == "kept"


def test_specific_config_merges_sections(tmp_path):
    specific = tmp_path / "specific.toml"
    specific.write_text('[drive]\nfolder_id = "override"\n', encoding="utf-8")

    config = load_config(TEST_CONFIG, specific)

    assert config.drive.folder_id == "override"
    assert config.drive.client_id == "client-id"


def test_unknown_credential_mode_is_rejected(monkeypatch):
    monkeypatch.setenv("DRIVE_CREDENTIAL_MODE", "magic")

    with pytest.raises(ValidationError):
        load_config(TEST_CONFIG)
