"""16-bit field helpers.

All multi-byte integers exchanged with the device are big-endian,
independent of the host byte order.
"""

from __future__ import annotations

U16_MAX = 0xFFFF


def swap16(value: int) -> int:
    """Swap the two bytes of a 16-bit value."""
    return ((value << 8) | (value >> 8)) & U16_MAX


def encode_u16(value: int) -> bytes:
    """Encode ``value`` as a big-endian 16-bit field.

    Raises:
        ValueError: If ``value`` does not fit in 16 bits.
    """
    if not 0 <= value <= U16_MAX:
        raise ValueError(f"16-bit field must be 0-{U16_MAX}, got {value}")
    return value.to_bytes(2, "big")


def decode_u16(data: bytes, offset: int = 0) -> int:
    """Decode the big-endian 16-bit field at ``offset``."""
    return int.from_bytes(data[offset : offset + 2], "big")
