from .subscriptions.handlers import PortalHandler
from .external.stripe import StripeClient, WebhookService

__all__ = [
    'PortalHandler',
    'StripeClient',
    'WebhookService',
]
