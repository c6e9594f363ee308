from abc import ABC, abstractmethod
from typing import Any, Dict

from vigil.billing.shared.models import PortalSession


class PaymentProviderInterface(ABC):

    @abstractmethod
    async def create_portal_session(self, customer_id: str, return_url: str) -> PortalSession:
        pass

    @abstractmethod
    async def retrieve_subscription(self, subscription_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def construct_event(self, payload: bytes, signature: str, secret: str) -> Dict[str, Any]:
        pass


class SubscriptionLookupInterface(ABC):

    @abstractmethod
    async def get_by_user_id(self, user_id: str):
        pass
