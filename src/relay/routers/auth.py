from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, RedirectResponse

from relay.core.context import ServiceContext, get_context
from relay.core.errors import ServiceError
from relay.shared import Logger

logger = Logger(__name__).get_logger()

router = APIRouter()


@router.get("/auth")
def begin_authorization(ctx: Annotated[ServiceContext, Depends(get_context)]):
    """Send the operator to the provider's consent screen."""
    url = ctx.credentials.begin_authorization()
    logger.info("Redirecting to consent screen")
    return RedirectResponse(url)


@router.get("/oauth-callback", response_class=PlainTextResponse)
def oauth_callback(
    ctx: Annotated[ServiceContext, Depends(get_context)],
    code: str | None = None,
    error: str | None = None,
):
    if error:
        logger.warning("Consent was not granted: %s", error)
        return PlainTextResponse(f"Authorization failed: {error}", status_code=400)

    try:
        ctx.credentials.complete_authorization(code or "")
    except ServiceError as e:
        return PlainTextResponse(f"Authorization failed: {e.message}", status_code=e.status_code)

    return PlainTextResponse("Authorization complete. You can close this window.")


@router.get("/auth/status")
async def authorization_status(ctx: Annotated[ServiceContext, Depends(get_context)]):
    return {"authorized": ctx.credentials.is_authorized(), "mode": ctx.credentials.mode}
