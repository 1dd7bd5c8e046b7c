from .serde_base import SerdeBase


class CreateOrderRequest(SerdeBase):
    order_id: str | None = None
    amount: float | None = None  # major currency units
    currency: str | None = None
    notes: dict[str, str] | None = None
