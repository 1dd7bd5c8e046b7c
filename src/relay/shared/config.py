import os
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING
from os import PathLike
from pathlib import Path
from tomllib import load
from typing import Literal

from pydantic import BaseModel, field_validator

DEFAULT_CONFIG_PATH = Path(os.environ.get("RELAY_CONFIG", "config.toml"))

# Environment variable -> (section, key). Applied over the TOML values.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "PORT": ("network", "port"),
    "ALLOWED_ORIGIN": ("network", "allowed_origins"),
    "LOG_LEVEL": ("logging", "level"),
    "DATABASE_URL": ("database", "url"),
    "DRIVE_CREDENTIAL_MODE": ("drive", "credential_mode"),
    "DRIVE_FOLDER_ID": ("drive", "folder_id"),
    "DRIVE_TOKEN_STORE": ("drive", "token_store"),
    "GOOGLE_SERVICE_ACCOUNT_FILE": ("drive", "service_account_file"),
    "GOOGLE_SERVICE_ACCOUNT_JSON": ("drive", "service_account_json"),
    "GOOGLE_CLIENT_ID": ("drive", "client_id"),
    "GOOGLE_CLIENT_SECRET": ("drive", "client_secret"),
    "GOOGLE_REDIRECT_URI": ("drive", "redirect_uri"),
    "GOOGLE_REFRESH_TOKEN": ("drive", "refresh_token"),
    "RAZORPAY_KEY_ID": ("payments", "key_id"),
    "RAZORPAY_KEY_SECRET": ("payments", "key_secret"),
    "SMTP_HOST": ("mail", "host"),
    "SMTP_PORT": ("mail", "port"),
    "SMTP_USER": ("mail", "username"),
    "SMTP_PASS": ("mail", "password"),
    "MAIL_FROM": ("mail", "sender"),
}


class General(BaseModel):
    title: str = "relay"


class Database(BaseModel):
    url: str = "sqlite:///relay.db"


class Logging(BaseModel):
    level: int = INFO

    @field_validator("level", mode="before")
    @classmethod
    def convert_log_level(cls, value):
        if isinstance(value, int):
            return value
        log_levels = {
            "DEBUG": DEBUG,
            "INFO": INFO,
            "WARNING": WARNING,
            "ERROR": ERROR,
            "CRITICAL": CRITICAL,
        }
        return log_levels.get(value.upper(), INFO)


class Paths(BaseModel):
    logs: str = "logs"


class Files(BaseModel):
    max_file_size: int = 26214400  # 25 MB default


class Network(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False
    allowed_origins: list[str] = ["*"]

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class Drive(BaseModel):
    credential_mode: Literal["static", "delegated"] = "static"
    folder_id: str = ""
    scopes: list[str] = ["https://www.googleapis.com/auth/drive"]

    # static secret
    service_account_file: str = ""
    service_account_json: str = ""

    # delegated consent
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    refresh_token: str = ""
    token_store: Literal["database", "none"] = "database"


class Payments(BaseModel):
    key_id: str = ""
    key_secret: str = ""
    currency: str = "INR"


class MailTemplate(BaseModel):
    subject: str
    body: str
    html: bool = False


class Mail(BaseModel):
    host: str = ""
    port: int = 587
    username: str = ""
    password: str = ""
    sender: str = ""
    use_tls: bool = False
    start_tls: bool = True
    templates: dict[str, MailTemplate] = {}


class Config(BaseModel):
    general: General = General()
    database: Database = Database()
    paths: Paths = Paths()
    files: Files = Files()
    logging: Logging = Logging()
    network: Network = Network()
    drive: Drive = Drive()
    payments: Payments = Payments()
    mail: Mail = Mail()


def apply_env_overrides(config_data: dict, environ=os.environ) -> dict:
    """Overlay environment values onto the parsed TOML sections."""
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        config_data.setdefault(section, {})[key] = value
    return config_data


def load_config(
    shared_config_file: PathLike = DEFAULT_CONFIG_PATH,
    specific_config_file: PathLike | None = None,
) -> Config:
    """Load and merge configurations from TOML files and the environment."""
    config_data: dict = {}

    # Load shared config
    shared_path = Path(shared_config_file)
    if shared_path.exists():
        with shared_path.open("rb") as f:
            config_data = load(f)

    # Load and merge specific config if provided
    if specific_config_file:
        with Path(specific_config_file).open("rb") as f:
            specific_data = load(f)
            for section, values in specific_data.items():
                config_data.setdefault(section, {}).update(values)

    apply_env_overrides(config_data)

    return Config(**config_data)
