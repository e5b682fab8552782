"""CRC-16 used by the USB HID link.

Polynomial 0x1021, initial value 0x0000, MSB first. The link transmits the
bitwise inverse of the result.
"""

from __future__ import annotations

POLYNOMIAL = 0x1021


def _make_table() -> list[int]:
    table = []
    for i in range(256):
        crc = i << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ POLYNOMIAL) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
        table.append(crc)
    return table


_TABLE = _make_table()


def crc16(data: bytes) -> int:
    """Return the inverted CRC-16 of ``data``."""
    crc = 0
    for byte in data:
        crc = ((crc << 8) & 0xFFFF) ^ _TABLE[((crc >> 8) ^ byte) & 0xFF]
    return crc ^ 0xFFFF
