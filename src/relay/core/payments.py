from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal

import razorpay

from relay.core.errors import ConfigurationError, ValidationError, provider_errors
from relay.shared import Logger
from relay.shared.config import Payments

logger = Logger(__name__).get_logger()


def build_razorpay_client(key_id: str, key_secret: str):
    return razorpay.Client(auth=(key_id, key_secret))


def to_minor_units(amount) -> int:
    """Convert a major-unit amount (e.g. rupees) to the smallest unit (paise)."""
    try:
        value = Decimal(str(amount))
    except ArithmeticError as e:
        raise ValidationError(f"Invalid amount: {amount}") from e

    if not value.is_finite() or value <= 0:
        raise ValidationError("amount must be a positive number")

    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway:
    def __init__(self, settings: Payments, client_factory: Callable = build_razorpay_client):
        self.settings = settings
        self._client_factory = client_factory
        self._client = None

    def client(self):
        if not (self.settings.key_id and self.settings.key_secret):
            raise ConfigurationError("RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET are required")
        if self._client is None:
            self._client = self._client_factory(self.settings.key_id, self.settings.key_secret)
        return self._client

    def create_order(
        self,
        order_id: str,
        amount,
        currency: str | None = None,
        notes: dict | None = None,
    ) -> dict:
        data = {
            "amount": to_minor_units(amount),
            "currency": currency or self.settings.currency,
            "receipt": order_id,
        }
        if notes:
            data["notes"] = notes

        client = self.client()
        with provider_errors("Create order"):
            order = client.order.create(data=data)

        logger.info("Created order %s for receipt %s", order.get("id"), order_id)
        return order
