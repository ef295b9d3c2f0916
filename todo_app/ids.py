"""Time-sortable todo identifiers.

Ids are ULIDs: a 48-bit millisecond timestamp followed by 80 bits of
randomness, written as 26 Crockford base32 characters. The string order of
two ids is their generation order. Ids generated in the same millisecond, or
after the clock stepped backwards, are the previous id plus one.
"""

from __future__ import annotations

import secrets
import threading
import time
from typing import Callable, NewType

TodoId = NewType("TodoId", str)

CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ID_LENGTH = 26

_TIMESTAMP_BITS = 48
_RANDOM_BITS = 80
_MAX_VALUE = (1 << (_TIMESTAMP_BITS + _RANDOM_BITS)) - 1


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def encode_id(value: int) -> TodoId:
    """Encode a 128-bit integer as a 26-character id."""
    if not 0 <= value <= _MAX_VALUE:
        raise ValueError("id value out of range")
    chars = []
    for _ in range(ID_LENGTH):
        chars.append(CROCKFORD_ALPHABET[value & 0x1F])
        value >>= 5
    return TodoId("".join(reversed(chars)))


def decode_id(todo_id: str) -> int:
    """Decode an id back to its integer value."""
    if len(todo_id) != ID_LENGTH:
        raise ValueError(f"id must be {ID_LENGTH} characters")
    value = 0
    for char in todo_id.upper():
        index = CROCKFORD_ALPHABET.find(char)
        if index < 0:
            raise ValueError(f"invalid id character: {char!r}")
        value = (value << 5) | index
    if value > _MAX_VALUE:
        raise ValueError("id value out of range")
    return value


def id_timestamp_ms(todo_id: str) -> int:
    """Return the millisecond timestamp embedded in an id."""
    return decode_id(todo_id) >> _RANDOM_BITS


class IdGenerator:
    """Monotonic ULID generator; clock and entropy are injectable."""

    def __init__(
        self,
        clock: Callable[[], int] = _now_ms,
        entropy: Callable[[int], int] = secrets.randbits,
    ) -> None:
        self._clock = clock
        self._entropy = entropy
        self._last_value = -1
        self._lock = threading.Lock()

    def new_id(self) -> TodoId:
        with self._lock:
            timestamp = self._clock() & ((1 << _TIMESTAMP_BITS) - 1)
            if timestamp > (self._last_value >> _RANDOM_BITS):
                value = (timestamp << _RANDOM_BITS) | self._entropy(_RANDOM_BITS)
            else:
                value = self._last_value + 1
            if value > _MAX_VALUE:
                raise OverflowError("todo id space exhausted")
            self._last_value = value
        return encode_id(value)


default_generator = IdGenerator()
