from .portal import PortalHandler

__all__ = [
    'PortalHandler',
]
