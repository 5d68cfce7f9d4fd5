"""
Events module for wacall.

Contains the dispatcher that routes parsed webhook records to the call
manager and broadcaster, and the logging-only default call manager.
"""

from .default_handlers import LoggingCallManager
from .dispatcher import (
    BROADCAST_MESSAGE_TYPES,
    CLASSIFIED_CALL_STATUSES,
    DispatchSummary,
    EventDispatcher,
)

__all__ = [
    "EventDispatcher",
    "DispatchSummary",
    "LoggingCallManager",
    "CLASSIFIED_CALL_STATUSES",
    "BROADCAST_MESSAGE_TYPES",
]
