from typing import Optional

from vigil.utils.logger import logger
from .base import BaseRepository


class SubscriptionEventRepository(BaseRepository):

    async def log_event(
        self,
        user_id: str,
        event_type: str,
        previous_tier: Optional[str],
        new_tier: Optional[str],
        stripe_event_id: str,
        stripe_event_type: str
    ) -> bool:
        """Append to the subscription audit trail. Failures are logged, never raised."""
        try:
            client = await self._get_client()
            await client.table('subscription_events').insert({
                'user_id': user_id,
                'event_type': event_type,
                'previous_tier': previous_tier,
                'new_tier': new_tier,
                'stripe_event_id': stripe_event_id,
                'stripe_event_type': stripe_event_type
            }).execute()
            return True
        except Exception as e:
            logger.error(f"[SUBSCRIPTION EVENTS] Error logging {event_type} for {user_id}: {e}")
            return False
