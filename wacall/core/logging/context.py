"""
Request context management using contextvars for automatic propagation.

The dispatcher sets the call and user identifiers once per dispatched element
and every logger created with get_logger() picks them up without manual
parameter passing.
"""

from contextvars import ContextVar

_call_context: ContextVar[str | None] = ContextVar(
    "call_id", default=None
)  # From call events and call statuses
_user_context: ContextVar[str | None] = ContextVar(
    "user_id", default=None
)  # Phone number from webhook JSON


def set_request_context(
    call_id: str | None = None,
    user_id: str | None = None,
) -> None:
    """
    Set the request context for the current async context.

    Args:
        call_id: Platform call identifier
        user_id: User phone number (WhatsApp ID)
    """
    if call_id is not None:
        _call_context.set(call_id)
    if user_id is not None:
        _user_context.set(user_id)


def get_current_call_context() -> str | None:
    """Get the current call ID from context variables."""
    return _call_context.get()


def get_current_user_context() -> str | None:
    """Get the current user ID from context variables."""
    return _user_context.get()


def clear_request_context() -> None:
    """
    Clear the request context.

    Used between dispatched elements so one event's identifiers never leak
    into the log lines of the next.
    """
    _call_context.set(None)
    _user_context.set(None)


def get_context_info() -> dict[str, str | None]:
    """
    Get current context information for debugging.

    Returns:
        Dictionary with current call_id and user_id
    """
    return {
        "call_id": get_current_call_context(),
        "user_id": get_current_user_context(),
    }
