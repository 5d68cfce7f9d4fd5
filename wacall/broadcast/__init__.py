"""
Broadcast transports for webhook events.

create_broadcaster() picks Redis Pub/Sub when REDIS_URL is configured and
falls back to a logging-only broadcaster otherwise.
"""

from wacall.core.config.settings import Settings
from wacall.domain.interfaces import IBroadcaster

from .broadcasters import LoggingBroadcaster, MemoryBroadcaster
from .redis_broadcaster import RedisBroadcaster


def create_broadcaster(settings: Settings) -> IBroadcaster:
    """
    Build the broadcaster configured by the environment.

    Args:
        settings: Application settings

    Returns:
        RedisBroadcaster if REDIS_URL is set, else LoggingBroadcaster
    """
    if settings.has_redis:
        return RedisBroadcaster(
            redis_url=settings.redis_url, channel_prefix=settings.broadcast_channel
        )
    return LoggingBroadcaster()


__all__ = [
    "LoggingBroadcaster",
    "MemoryBroadcaster",
    "RedisBroadcaster",
    "create_broadcaster",
]
