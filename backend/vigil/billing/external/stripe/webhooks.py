from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe

from vigil.utils.logger import logger
from vigil.billing.shared.models import HandlerResult, METHOD_NOT_ALLOWED
from ..interfaces import PaymentProviderInterface

TIER_ORDER = ['free', 'professional', 'team', 'enterprise']


def _iso(timestamp: Optional[int]) -> Optional[str]:
    if not timestamp:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _metadata(obj: Dict[str, Any]) -> Dict[str, Any]:
    return obj.get('metadata') or {}


def classify_tier_change(previous_tier: Optional[str], new_tier: Optional[str], cancel_at_period_end: bool) -> str:
    if previous_tier != new_tier:
        old_rank = TIER_ORDER.index(previous_tier) if previous_tier in TIER_ORDER else -1
        new_rank = TIER_ORDER.index(new_tier) if new_tier in TIER_ORDER else -1
        return 'upgraded' if new_rank > old_rank else 'downgraded'
    if cancel_at_period_end:
        return 'canceled'
    return 'updated'


class WebhookService:
    """
    Mirrors Stripe subscription lifecycle events into ``user_subscriptions``
    and appends each transition to ``subscription_events``.

    The Firebase user id travels in the Stripe object's ``firebase_uid``
    metadata; events without it only update rows matched by subscription id.
    """

    def __init__(self, subscriptions, events, payments: PaymentProviderInterface, webhook_secret: Optional[str]):
        self.subscriptions = subscriptions
        self.events = events
        self.payments = payments
        self.webhook_secret = webhook_secret

    async def process(self, method: str, payload: bytes, signature: Optional[str]) -> HandlerResult:
        if method.upper() != 'POST':
            return METHOD_NOT_ALLOWED.to_result()

        try:
            if not self.webhook_secret:
                raise ValueError("Webhook secret not configured")
            event = self.payments.construct_event(payload, signature, self.webhook_secret)
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.error(f"[WEBHOOK] Signature verification failed: {e}")
            return HandlerResult(status_code=400, body={'error': f"Webhook Error: {e}"})

        try:
            await self.dispatch(event)
        except Exception as e:
            logger.error(f"[WEBHOOK] Error processing {event['type']} ({event['id']}): {e}", exc_info=True)
            return HandlerResult(status_code=500, body={'error': 'Webhook processing failed'})

        return HandlerResult(status_code=200, body={'received': True})

    async def dispatch(self, event) -> None:
        event_type = event['type']
        obj = event['data']['object']
        logger.info(f"[WEBHOOK] Processing event type: {event_type} (ID: {event['id']})")

        if event_type == 'checkout.session.completed':
            await self._handle_checkout_completed(event, obj)
        elif event_type == 'customer.subscription.updated':
            await self._handle_subscription_updated(event, obj)
        elif event_type == 'customer.subscription.deleted':
            await self._handle_subscription_deleted(event, obj)
        elif event_type == 'invoice.payment_failed':
            await self._handle_payment_failed(event, obj)
        elif event_type == 'invoice.paid':
            await self._handle_invoice_paid(event, obj)
        else:
            logger.info(f"[WEBHOOK] Unhandled event type: {event_type}")

    async def _log(self, event, user_id: str, event_type: str, previous_tier=None, new_tier=None):
        await self.events.log_event(
            user_id, event_type, previous_tier, new_tier, event['id'], event['type']
        )

    async def _handle_checkout_completed(self, event, session):
        metadata = _metadata(session)
        user_id = metadata.get('firebase_uid')
        tier = metadata.get('tier')
        if not (user_id and tier):
            logger.warning(f"[WEBHOOK] Checkout session {session.get('id')} has no firebase_uid/tier metadata")
            return

        subscription_id = session.get('subscription')
        subscription = await self.payments.retrieve_subscription(subscription_id)
        items = (subscription.get('items') or {}).get('data') or []
        price_id = (items[0].get('price') or {}).get('id') if items else None

        await self.subscriptions.upsert_subscription({
            'user_id': user_id,
            'tier': tier,
            'status': 'active',
            'stripe_customer_id': session.get('customer'),
            'stripe_subscription_id': subscription_id,
            'stripe_price_id': price_id,
            'billing_email': session.get('customer_email'),
            'billing_period': metadata.get('billing_period') or 'monthly',
            'current_period_start': _iso(subscription.get('current_period_start')),
            'current_period_end': _iso(subscription.get('current_period_end')),
        })
        logger.info(f"[WEBHOOK] Activated {tier} subscription {subscription_id} for user {user_id}")
        await self._log(event, user_id, 'created', 'free', tier)

    async def _handle_subscription_updated(self, event, subscription):
        user_id = _metadata(subscription).get('firebase_uid')
        if not user_id:
            return

        subscription_id = subscription.get('id')
        current = await self.subscriptions.get_by_stripe_subscription_id(subscription_id)
        previous_tier = current.get('tier') if current else None
        new_tier = _metadata(subscription).get('tier') or previous_tier
        cancel_at_period_end = bool(subscription.get('cancel_at_period_end'))

        await self.subscriptions.update_by_stripe_subscription_id(subscription_id, {
            'status': subscription.get('status'),
            'tier': new_tier,
            'current_period_start': _iso(subscription.get('current_period_start')),
            'current_period_end': _iso(subscription.get('current_period_end')),
            'cancel_at_period_end': cancel_at_period_end,
        })

        change = classify_tier_change(previous_tier, new_tier, cancel_at_period_end)
        await self._log(event, user_id, change, previous_tier, new_tier)

    async def _handle_subscription_deleted(self, event, subscription):
        subscription_id = subscription.get('id')
        await self.subscriptions.update_by_stripe_subscription_id(subscription_id, {
            'tier': 'free',
            'status': 'canceled',
            'stripe_subscription_id': None,
            'stripe_price_id': None,
            'current_period_end': None,
            'cancel_at_period_end': False,
        })

        metadata = _metadata(subscription)
        user_id = metadata.get('firebase_uid')
        if user_id:
            await self._log(event, user_id, 'canceled', metadata.get('tier'), 'free')

    async def _handle_payment_failed(self, event, invoice):
        subscription_id = invoice.get('subscription')
        if not subscription_id:
            return

        await self.subscriptions.update_by_stripe_subscription_id(subscription_id, {'status': 'past_due'})
        logger.warning(f"[WEBHOOK] Payment failed for subscription {subscription_id}")

        subscription = await self.payments.retrieve_subscription(subscription_id)
        user_id = _metadata(subscription).get('firebase_uid')
        if user_id:
            await self._log(event, user_id, 'payment_failed')

    async def _handle_invoice_paid(self, event, invoice):
        subscription_id = invoice.get('subscription')
        if not subscription_id or invoice.get('billing_reason') != 'subscription_cycle':
            return

        await self.subscriptions.update_by_stripe_subscription_id(subscription_id, {'status': 'active'})

        subscription = await self.payments.retrieve_subscription(subscription_id)
        user_id = _metadata(subscription).get('firebase_uid')
        if user_id:
            await self._log(event, user_id, 'renewed')
