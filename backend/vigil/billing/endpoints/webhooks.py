from fastapi import APIRouter, Depends, Request # type: ignore
from fastapi.responses import JSONResponse # type: ignore

from vigil.utils.config import config
from ..external.stripe import WebhookService
from ..subscriptions.repositories import SubscriptionRepository, SubscriptionEventRepository
from .portal import ALL_METHODS

router = APIRouter(tags=["billing-webhooks"])


def get_webhook_service(request: Request) -> WebhookService:
    state = request.app.state
    return WebhookService(
        subscriptions=SubscriptionRepository(state.db),
        events=SubscriptionEventRepository(state.db),
        payments=state.stripe_client,
        webhook_secret=config.STRIPE_WEBHOOK_SECRET,
    )


@router.api_route("/webhook", methods=ALL_METHODS)
async def stripe_webhook(
    request: Request,
    service: WebhookService = Depends(get_webhook_service)
) -> JSONResponse:
    payload = await request.body()
    result = await service.process(request.method, payload, request.headers.get('stripe-signature'))
    return JSONResponse(status_code=result.status_code, content=result.body)
