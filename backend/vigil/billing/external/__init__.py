from .stripe import StripeClient, WebhookService
from .interfaces import PaymentProviderInterface, SubscriptionLookupInterface

__all__ = [
    'StripeClient',
    'WebhookService',
    'PaymentProviderInterface',
    'SubscriptionLookupInterface',
]
