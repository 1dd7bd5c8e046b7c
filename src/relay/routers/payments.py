from typing import Annotated

from fastapi import APIRouter, Depends

from relay.core.context import ServiceContext, get_context
from relay.core.errors import ValidationError
from relay.models.requests import CreateOrderRequest
from relay.shared import Logger

logger = Logger(__name__).get_logger()

router = APIRouter()


@router.post("/create-order")
def create_order(
    data: CreateOrderRequest,
    ctx: Annotated[ServiceContext, Depends(get_context)],
):
    """Create a payment order and return the provider's order object as-is."""
    if not data.order_id or data.amount is None:
        raise ValidationError("orderId and amount are required")

    logger.debug("Creating order for %s, amount %s", data.order_id, data.amount)
    return ctx.payments.create_order(
        data.order_id,
        data.amount,
        currency=data.currency,
        notes=data.notes,
    )
