from .base import BaseRepository
from .subscription import SubscriptionRepository
from .events import SubscriptionEventRepository

__all__ = [
    'BaseRepository',
    'SubscriptionRepository',
    'SubscriptionEventRepository',
]
