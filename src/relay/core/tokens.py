from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy import Engine
from sqlmodel import Session, select

from relay.models.schema import StoredToken, utc_now
from relay.shared import Logger

logger = Logger(__name__).get_logger()

DRIVE_PROVIDER = "google-drive"


def as_utc(value: datetime | None) -> datetime | None:
    """Normalise to aware UTC; naive timestamps are taken to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def as_naive_utc(value: datetime | None) -> datetime | None:
    """google-auth compares expiries against naive UTC timestamps."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class TokenPair:
    access_token: str | None = None
    refresh_token: str | None = None
    expiry: datetime | None = None


class TokenVault:
    """Durable home for a provider's delegated token pair."""

    def __init__(self, engine: Engine, provider: str = DRIVE_PROVIDER):
        self.engine = engine
        self.provider = provider

    def read(self) -> TokenPair | None:
        with Session(self.engine) as session:
            row = session.exec(
                select(StoredToken).where(StoredToken.provider == self.provider)
            ).first()

        if row is None:
            logger.debug("No stored token for %s", self.provider)
            return None

        return TokenPair(
            access_token=row.access_token,
            refresh_token=row.refresh_token,
            expiry=as_naive_utc(row.expiry),
        )

    def write(self, tokens: TokenPair):
        with Session(self.engine) as session:
            row = session.exec(
                select(StoredToken).where(StoredToken.provider == self.provider)
            ).first()

            if row is None:
                row = StoredToken(provider=self.provider, refresh_token=tokens.refresh_token)

            row.access_token = tokens.access_token
            row.refresh_token = tokens.refresh_token
            row.expiry = as_utc(tokens.expiry)
            row.updated_at = utc_now()

            session.add(row)
            session.commit()

        logger.info("Stored token pair for %s", self.provider)
