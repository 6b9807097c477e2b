"""
Smelt context management using contextvars.

Stores the smelt ID being processed so every log line emitted while handling it
can be correlated without passing the ID through each call.
"""

from contextvars import ContextVar, Token

_smelt_id_var: ContextVar[str | None] = ContextVar("smelt_id", default=None)


def get_smelt_id() -> str | None:
    """
    Get the smelt ID from the current context.

    Returns:
        Smelt ID if set, None otherwise
    """
    return _smelt_id_var.get()


def set_smelt_id(smelt_id: str) -> Token:
    """
    Set the smelt ID in the current context.

    Args:
        smelt_id: The smelt ID to store

    Returns:
        Token for restoring the previous value with ``reset_smelt_id``
    """
    return _smelt_id_var.set(smelt_id)


def reset_smelt_id(token: Token) -> None:
    _smelt_id_var.reset(token)
