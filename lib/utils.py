# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Small helpers used across the application:
# - Resource identifiers (16-character alphanumeric IDs)
# - Human-readable formatting for byte sizes and request paths
# - Process uptime and event loop lag measurements
# =============================================================================

import asyncio
import secrets
import string
import time

# Captured at import time; the app imports this module during startup.
_PROCESS_STARTED = time.monotonic()


# =============================================================================
# Identifier Utilities
# =============================================================================

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 16
ID_PATTERN = r"^[A-Za-z0-9]{16}$"


def generate_id(size: int = ID_LENGTH) -> str:
    """
    Generate a random alphanumeric identifier.

    Used for resource primary keys and request IDs. Uses the `secrets`
    module so IDs are not guessable.

    Args:
        size: Number of characters (default: 16)

    Returns:
        Random string drawn from [A-Za-z0-9]

    Example:
        item_id = generate_id()  # "A1b2C3d4E5f6G7h8"
    """
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(size))


# =============================================================================
# Formatting Utilities
# =============================================================================

def format_bytes(size: int) -> str:
    """
    Format a byte count for error messages.

    Example:
        format_bytes(1048576)  # "1 MB"
        format_bytes(1536)     # "1.5 KB"
    """
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            text = f"{value:.2f}".rstrip("0").rstrip(".")
            return f"{text} {unit}"
        value /= 1024
    return f"{size} B"


def shorten_path(path: str, max_length: int = 20) -> str:
    """Truncate a request path for aligned log output."""
    if len(path) > max_length:
        return path[: max_length - 1] + "…"
    return path


# =============================================================================
# Timing Utilities
# =============================================================================

def process_uptime() -> float:
    """Seconds since the process imported the application."""
    return time.monotonic() - _PROCESS_STARTED


async def get_event_loop_lag() -> float:
    """
    Estimate event loop lag in milliseconds.

    Yields control once and measures how long it takes to be scheduled
    again. A busy loop shows up as a larger value.
    """
    started = time.perf_counter()
    await asyncio.sleep(0)
    return (time.perf_counter() - started) * 1000
