from .client import StripeClient
from .webhooks import WebhookService

__all__ = [
    'StripeClient',
    'WebhookService',
]
