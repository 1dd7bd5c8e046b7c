from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(UTC)


class StoredToken(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    provider: str = Field(
        ..., unique=True, index=True, description="Provider the token pair belongs to"
    )
    access_token: str | None = Field(default=None, description="Short-lived access token")
    refresh_token: str = Field(..., description="Long-lived refresh token")
    expiry: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        description="Access token expiry (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Timestamp of the last exchange",
    )
