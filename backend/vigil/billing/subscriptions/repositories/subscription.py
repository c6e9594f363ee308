from typing import Any, Dict, Optional

from vigil.billing.shared.errors import SubscriptionLookupError
from vigil.billing.shared.models import SubscriptionRecord
from ...external.interfaces import SubscriptionLookupInterface
from .base import BaseRepository

TABLE = 'user_subscriptions'


class SubscriptionRepository(BaseRepository, SubscriptionLookupInterface):

    async def get_by_user_id(self, user_id: str) -> Optional[SubscriptionRecord]:
        client = await self._get_client()
        # Two rows are enough to tell "exactly one" from "ambiguous"
        result = await client.table(TABLE)\
            .select('user_id, stripe_customer_id, stripe_subscription_id, tier, status')\
            .eq('user_id', user_id)\
            .limit(2)\
            .execute()

        rows = result.data or []
        if len(rows) > 1:
            raise SubscriptionLookupError(f"Multiple subscription rows for user {user_id}")
        if not rows:
            return None
        return SubscriptionRecord.from_row(rows[0])

    async def get_by_stripe_subscription_id(self, subscription_id: str) -> Optional[Dict[str, Any]]:
        client = await self._get_client()
        result = await client.table(TABLE)\
            .select('user_id, tier')\
            .eq('stripe_subscription_id', subscription_id)\
            .execute()

        return result.data[0] if result.data else None

    async def upsert_subscription(self, row: Dict[str, Any]) -> None:
        client = await self._get_client()
        await client.table(TABLE).upsert(row, on_conflict='user_id').execute()

    async def update_by_stripe_subscription_id(self, subscription_id: str, changes: Dict[str, Any]) -> None:
        if not changes:
            return
        client = await self._get_client()
        await client.table(TABLE)\
            .update(changes)\
            .eq('stripe_subscription_id', subscription_id)\
            .execute()
