from fastapi import APIRouter, Depends, Request # type: ignore
from fastapi.responses import JSONResponse # type: ignore

from vigil.utils.config import config
from ..subscriptions.handlers.portal import PortalHandler
from ..subscriptions.repositories import SubscriptionRepository

router = APIRouter(tags=["billing-portal"])

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def get_portal_handler(request: Request) -> PortalHandler:
    state = request.app.state
    return PortalHandler(
        subscriptions=SubscriptionRepository(state.db),
        payments=state.stripe_client,
        default_return_url=config.portal_return_url,
    )


async def read_json_body(request: Request):
    """Parsed JSON body, or None when the body is empty or not JSON."""
    try:
        return await request.json()
    except ValueError:
        return None


# Registered for every method so the handler owns the 405 response body
@router.api_route("/create-portal", methods=ALL_METHODS)
async def create_portal(
    request: Request,
    handler: PortalHandler = Depends(get_portal_handler)
) -> JSONResponse:
    """Create a Stripe billing-portal session for the user in the request body."""
    body = await read_json_body(request) if request.method == "POST" else None
    result = await handler.handle(request.method, body)
    return JSONResponse(status_code=result.status_code, content=result.body)
