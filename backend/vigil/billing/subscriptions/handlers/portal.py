from typing import Any, Optional

from pydantic import ValidationError

from vigil.utils.logger import logger
from vigil.billing.shared.models import (
    HandlerResult,
    PortalRequest,
    METHOD_NOT_ALLOWED,
    MISSING_USER_ID,
    NO_SUBSCRIPTION_FOUND,
)
from vigil.billing.external.interfaces import PaymentProviderInterface, SubscriptionLookupInterface
from vigil.utils.config import DEFAULT_PORTAL_RETURN_URL


class PortalHandler:
    """
    Creates a Stripe billing-portal session for a user.

    Flow: validate -> look up the user's Stripe customer id -> create session.
    Every path ends in exactly one HandlerResult:

        405  non-POST
        400  missing/empty userId
        404  lookup failed, no row, ambiguous rows, or no stripe_customer_id
        500  session creation raised (provider message passed through)
        200  {"url": <portal url>}

    Lookup errors and misses are deliberately indistinguishable to the caller.
    """

    def __init__(
        self,
        subscriptions: SubscriptionLookupInterface,
        payments: PaymentProviderInterface,
        default_return_url: Optional[str] = None
    ):
        self.subscriptions = subscriptions
        self.payments = payments
        self.default_return_url = default_return_url or DEFAULT_PORTAL_RETURN_URL

    async def handle(self, method: str, body: Any) -> HandlerResult:
        if method.upper() != 'POST':
            return METHOD_NOT_ALLOWED.to_result()

        request = self._parse(body)
        if request is None:
            return MISSING_USER_ID.to_result()

        return_url = request.return_url or self.default_return_url

        customer_id = await self._lookup_customer_id(request.user_id)
        if not customer_id:
            return NO_SUBSCRIPTION_FOUND.to_result()

        try:
            session = await self.payments.create_portal_session(customer_id, return_url)
        except Exception as e:
            logger.error(f"[PORTAL] Error creating portal session for user {request.user_id}: {e}", exc_info=True)
            return HandlerResult(status_code=500, body={'error': str(e)})

        logger.info(f"[PORTAL] Created portal session for user {request.user_id}")
        return HandlerResult(status_code=200, body={'url': session.url})

    @staticmethod
    def _parse(body: Any) -> Optional[PortalRequest]:
        if not isinstance(body, dict):
            return None
        try:
            request = PortalRequest.model_validate(body)
        except ValidationError:
            return None
        if not request.user_id:
            return None
        return request

    async def _lookup_customer_id(self, user_id: str) -> Optional[str]:
        try:
            record = await self.subscriptions.get_by_user_id(user_id)
        except Exception as e:
            logger.warning(f"[PORTAL] Subscription lookup failed for user {user_id}: {e}")
            return None

        if record is None:
            logger.debug(f"[PORTAL] No subscription row for user {user_id}")
            return None
        return record.stripe_customer_id or None
