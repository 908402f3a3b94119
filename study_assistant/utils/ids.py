from __future__ import annotations

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Current time as integer milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def _random_suffix(length: int = 9) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def new_identifier(prefix: str | None = None) -> str:
    """Return a time-based identifier such as ``course_1718000000000_k3j9x0a1b``."""

    body = f"{now_ms()}_{_random_suffix()}"
    return f"{prefix}_{body}" if prefix else body
