"""
wacall - WhatsApp Business calling webhook bridge.

Authenticates platform webhook deliveries, parses call and message events
and dispatches them in order to a call-state manager and a real-time
broadcaster.
"""

from .core.app import create_app
from .core.config.settings import settings
from .core.events import EventDispatcher, LoggingCallManager
from .domain.interfaces import IBroadcaster, ICallManager
from .webhooks import EventParser, SignatureVerifier, SubscriptionHandshake

__version__ = settings.version

__all__ = [
    "create_app",
    "EventDispatcher",
    "EventParser",
    "SignatureVerifier",
    "SubscriptionHandshake",
    "ICallManager",
    "IBroadcaster",
    "LoggingCallManager",
]
