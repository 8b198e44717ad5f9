"""
Ticket ID generation.

IDs look like ``pos-<ms epoch>-<base36 token>`` so they sort roughly by
creation time and double as the server idempotency key.
"""

import secrets
import time
from collections.abc import Callable

TICKET_PREFIX = "pos"
SUFFIX_LENGTH = 6

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def now_ms() -> int:
    """Current wall-clock time in ms since epoch."""
    return time.time_ns() // 1_000_000


def _random_token(length: int, randbelow: Callable[[int], int]) -> str:
    return "".join(_BASE36[randbelow(36)] for _ in range(length))


def generate_ticket_id(
    now: int | None = None,
    randbelow: Callable[[int], int] | None = None,
) -> str:
    """
    Generate a new ticket ID.

    Args:
        now: Timestamp in ms (defaults to the current time)
        randbelow: Random source compatible with secrets.randbelow

    Returns:
        Ticket ID such as ``pos-1718000000000-k3x9ab``
    """
    timestamp = now if now is not None else now_ms()
    token = _random_token(SUFFIX_LENGTH, randbelow or secrets.randbelow)
    return f"{TICKET_PREFIX}-{timestamp}-{token}"


def ticket_suffix(ticket_id: str) -> str:
    """Short display form: the last dash-separated segment."""
    return ticket_id.rsplit("-", 1)[-1]


def ticket_timestamp(ticket_id: str) -> int | None:
    """Generation time embedded in a ticket ID, None if not parseable."""
    parts = ticket_id.split("-")
    if len(parts) < 3 or parts[0] != TICKET_PREFIX:
        return None
    try:
        return int(parts[1])
    except ValueError:
        return None
