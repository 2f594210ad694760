import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_last_ms = 0


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def _now_ms() -> int:
    # never step backwards even if the wall clock does
    global _last_ms
    _last_ms = max(_last_ms, time.time_ns() // 1_000_000)
    return _last_ms


def generate_id(prefix: str = "id") -> str:
    """Build `<prefix>_<7 random base-36 chars><base-36 ms timestamp>`."""
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(7))
    return f"{prefix}_{random_part}{_base36(_now_ms())}"
