"""Credential store for the storage provider.

Two variants share one interface and are chosen once at startup:

- ``StaticSecretStore``: a service-account key, valid for the process lifetime.
- ``DelegatedTokenStore``: an access/refresh token pair obtained through the
  user-consent flow and replaced whenever a new exchange completes.

Every privileged call checks ``is_authorized()`` first.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from google.oauth2 import service_account
from google.oauth2.credentials import Credentials as UserCredentials
from google_auth_oauthlib.flow import Flow
from sqlalchemy import Engine

from relay.core.errors import (
    AuthorizationUnavailable,
    ConfigurationError,
    ProviderError,
    ValidationError,
    provider_errors,
    provider_message,
)
from relay.core.tokens import TokenPair, TokenVault
from relay.shared import Logger
from relay.shared.config import Drive

logger = Logger(__name__).get_logger()

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"

FlowFactory = Callable[[], Flow]


class CredentialStore(ABC):
    mode: str

    @abstractmethod
    def is_authorized(self) -> bool: ...

    @abstractmethod
    def load(self, material) -> None: ...

    @abstractmethod
    def google_credentials(self): ...

    def begin_authorization(self) -> str:
        raise AuthorizationUnavailable(
            f"Authorization flow is not available in {self.mode} credential mode"
        )

    def complete_authorization(self, code: str) -> None:
        raise AuthorizationUnavailable(
            f"Authorization flow is not available in {self.mode} credential mode"
        )


class StaticSecretStore(CredentialStore):
    mode = "static"

    def __init__(self, secret: dict | None, scopes: list[str]):
        self.scopes = scopes
        self._secret = secret

    def is_authorized(self) -> bool:
        return self._secret is not None

    def load(self, material: dict) -> None:
        self._secret = material
        logger.info("Static secret loaded")

    def google_credentials(self):
        return service_account.Credentials.from_service_account_info(
            self._secret, scopes=self.scopes
        )


class DelegatedTokenStore(CredentialStore):
    mode = "delegated"

    def __init__(
        self,
        settings: Drive,
        vault: TokenVault | None = None,
        tokens: TokenPair | None = None,
        flow_factory: FlowFactory | None = None,
    ):
        self.settings = settings
        self.vault = vault
        self._tokens = tokens or TokenPair()
        self._flow_factory = flow_factory or self._default_flow

    @property
    def tokens(self) -> TokenPair:
        return self._tokens

    def is_authorized(self) -> bool:
        return bool(self._tokens.refresh_token)

    def load(self, material: TokenPair) -> None:
        if self.vault is not None:
            # Persist first so a failed write leaves the current pair in place
            with provider_errors("Token persistence"):
                self.vault.write(material)
        else:
            logger.warning(
                "No token store configured. Copy the refresh token into "
                "GOOGLE_REFRESH_TOKEN to keep it across restarts."
            )

        # Single assignment; readers see either the old or the new pair
        self._tokens = material

    def begin_authorization(self) -> str:
        flow = self._flow_factory()
        url, _ = flow.authorization_url(
            access_type="offline",
            include_granted_scopes="true",
            prompt="consent",
        )
        logger.debug("Built consent URL")
        return url

    def complete_authorization(self, code: str) -> None:
        if not code:
            raise ValidationError("Missing authorization code")

        flow = self._flow_factory()
        try:
            flow.fetch_token(code=code)
        except Exception as e:
            message = provider_message(e)
            logger.error("Token exchange failed: %s", message)
            raise ProviderError(message) from e

        creds = flow.credentials
        # Google omits the refresh token when consent was granted before
        refresh_token = creds.refresh_token or self._tokens.refresh_token
        if not refresh_token:
            logger.error("Token exchange returned no refresh token")
            raise ProviderError("Provider did not issue a refresh token")

        self.load(
            TokenPair(
                access_token=creds.token,
                refresh_token=refresh_token,
                expiry=creds.expiry,
            )
        )
        logger.info("Delegated authorization completed")

    def google_credentials(self):
        return UserCredentials(
            token=self._tokens.access_token,
            refresh_token=self._tokens.refresh_token,
            expiry=self._tokens.expiry,
            token_uri=TOKEN_URI,
            client_id=self.settings.client_id,
            client_secret=self.settings.client_secret,
            scopes=self.settings.scopes,
        )

    def _default_flow(self) -> Flow:
        settings = self.settings
        if not (settings.client_id and settings.client_secret and settings.redirect_uri):
            raise ConfigurationError(
                "GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and GOOGLE_REDIRECT_URI are required"
            )

        client_config = {
            "web": {
                "client_id": settings.client_id,
                "client_secret": settings.client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [settings.redirect_uri],
            }
        }
        return Flow.from_client_config(
            client_config,
            scopes=settings.scopes,
            redirect_uri=settings.redirect_uri,
            autogenerate_code_verifier=False,
        )


def read_static_secret(settings: Drive) -> dict | None:
    """Inline JSON wins over the key file. Returns None when neither is set."""
    if settings.service_account_json:
        try:
            return json.loads(settings.service_account_json)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"GOOGLE_SERVICE_ACCOUNT_JSON is not valid JSON: {e}"
            ) from e

    if settings.service_account_file:
        path = Path(settings.service_account_file).expanduser()
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Could not read service account key {path}: {e}"
            ) from e

    return None


def build_credential_store(settings: Drive, engine: Engine | None = None) -> CredentialStore:
    if settings.credential_mode == "static":
        secret = read_static_secret(settings)
        if secret is None:
            logger.warning("No service account key configured; storage calls will be refused")
        return StaticSecretStore(secret, scopes=settings.scopes)

    vault = None
    if settings.token_store == "database":
        if engine is None:
            raise ConfigurationError("Database token store requires a database engine")
        vault = TokenVault(engine)

    tokens = None
    if settings.refresh_token:
        tokens = TokenPair(refresh_token=settings.refresh_token)
        logger.info("Seeded refresh token from environment")
    elif vault is not None:
        tokens = vault.read()

    store = DelegatedTokenStore(settings, vault=vault, tokens=tokens)
    logger.info("Delegated credential store ready; authorized=%s", store.is_authorized())
    return store
