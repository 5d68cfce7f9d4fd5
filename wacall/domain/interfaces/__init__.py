"""Interfaces of the collaborators the webhook dispatcher drives."""

from .broadcaster import BroadcastEventName, IBroadcaster
from .call_manager import ICallManager

__all__ = ["BroadcastEventName", "IBroadcaster", "ICallManager"]
