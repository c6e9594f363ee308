from typing import Any, Callable, Dict, Optional
import stripe

from vigil.utils.logger import logger
from vigil.utils.config import config
from vigil.billing.shared.models import PortalSession
from vigil.billing.shared.errors import (
    PaymentProviderError,
    PaymentProviderRejectedError,
    PaymentProviderUnavailableError,
)
from ..interfaces import PaymentProviderInterface

# Provider refused the request; retrying the same call cannot succeed
REJECTED_ERRORS = (
    stripe.InvalidRequestError,
    stripe.CardError,
    stripe.AuthenticationError,
    stripe.PermissionError,
    stripe.IdempotencyError,
)

UNAVAILABLE_ERRORS = (
    stripe.APIConnectionError,
    stripe.RateLimitError,
    stripe.APIError,
)


def _provider_message(error: stripe.StripeError) -> str:
    # StripeError.__str__ prefixes the request id; callers want the bare message
    return error.user_message or str(error)


class StripeClient(PaymentProviderInterface):
    """
    Payment-provider collaborator.

    Holds its own API key and passes it per call instead of mutating the
    module-global ``stripe.api_key``, so several clients (or test fakes) can
    coexist in one process.
    """

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else config.STRIPE_SECRET_KEY
        if not self.api_key:
            logger.warning("[STRIPE] STRIPE_SECRET_KEY is not configured; provider calls will fail")

    async def _call(self, func: Callable, *args, **kwargs) -> Any:
        try:
            return await func(*args, api_key=self.api_key, **kwargs)
        except REJECTED_ERRORS as e:
            raise PaymentProviderRejectedError(_provider_message(e), code=e.code) from e
        except UNAVAILABLE_ERRORS as e:
            raise PaymentProviderUnavailableError(_provider_message(e), code=e.code) from e
        except stripe.StripeError as e:
            raise PaymentProviderError(_provider_message(e), code=e.code) from e

    async def create_portal_session(self, customer_id: str, return_url: str) -> PortalSession:
        session = await self._call(
            stripe.billing_portal.Session.create_async,
            customer=customer_id,
            return_url=return_url
        )
        logger.debug(f"[STRIPE] Created billing portal session {session.id} for customer {customer_id}")
        return PortalSession(url=session.url)

    async def retrieve_subscription(self, subscription_id: str) -> Dict[str, Any]:
        subscription = await self._call(stripe.Subscription.retrieve_async, subscription_id)
        return subscription.to_dict()

    def construct_event(self, payload: bytes, signature: str, secret: str) -> Dict[str, Any]:
        # Raises stripe.SignatureVerificationError or ValueError; the webhook
        # service maps both to a 400. StripeObject is not a dict, so handlers
        # receive plain data.
        return stripe.Webhook.construct_event(payload, signature, secret).to_dict()
