"""Salt strings appended to a key on each weighted CH3 retry."""

from typing import Iterator


def salt(attempt: int) -> bytes:
    """
    Return the salt for a 0-based attempt index.

    Attempt 0 uses no salt, so the first probe hits the same index as the
    plain consistent hash. Later attempts use the decimal digits of the
    attempt index written in reverse (1 -> "1", 10 -> "01", 21 -> "12").
    The rule is shared by every process routing to the same pool and must
    not change.

    Args:
        attempt: Attempt index, 0 or greater

    Returns:
        ASCII salt bytes
    """
    if attempt < 0:
        raise ValueError(f"attempt must be non-negative, got {attempt}")
    if attempt == 0:
        return b""
    return str(attempt)[::-1].encode("ascii")


def salted_key(key: bytes, attempt: int) -> bytes:
    """Concatenate *key* with the salt for *attempt*."""
    return key + salt(attempt)


def iter_salts(start: int = 0) -> Iterator[bytes]:
    """Yield salts for attempts ``start, start + 1, ...`` without end."""
    attempt = start
    while True:
        yield salt(attempt)
        attempt += 1
