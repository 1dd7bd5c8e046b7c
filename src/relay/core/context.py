from dataclasses import dataclass

from fastapi import Request

from relay.core.credentials import CredentialStore, build_credential_store
from relay.core.drive import DriveGateway
from relay.core.mail import Mailer
from relay.core.payments import PaymentGateway
from relay.shared import Config, Logger
from relay.shared.db import create_db_engine

logger = Logger(__name__).get_logger()


@dataclass
class ServiceContext:
    """Everything a request handler needs, built once at startup."""

    config: Config
    credentials: CredentialStore
    drive: DriveGateway
    payments: PaymentGateway
    mailer: Mailer


def build_context(config: Config) -> ServiceContext:
    engine = None
    if config.drive.credential_mode == "delegated" and config.drive.token_store == "database":
        engine = create_db_engine(config.database.url)

    credentials = build_credential_store(config.drive, engine)
    logger.info("Credential mode: %s", credentials.mode)

    return ServiceContext(
        config=config,
        credentials=credentials,
        drive=DriveGateway(credentials, config.drive.folder_id),
        payments=PaymentGateway(config.payments),
        mailer=Mailer(config.mail),
    )


def get_context(request: Request) -> ServiceContext:
    return request.app.state.context
