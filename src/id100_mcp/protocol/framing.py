"""Link-layer framing of command messages into 64-byte USB HID reports.

Message layout::

    +----------+---------+---------+------------------+----------+
    | Preamble |  Size   | Command |     Payload      | Checksum |
    | 2 bytes  | 2 bytes | 1 byte  |  variable length |  2 bytes |
    +----------+---------+---------+------------------+----------+

- Preamble: 0xAA 0x55
- Size: little-endian length of (command byte + payload)
- Checksum: inverted CRC-16 over (command + payload), little-endian

A message is carried in one or more HID reports. Each report starts with
the number of meaningful bytes that follow (at most 63) and is zero padded
to 64 bytes.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..utils.crc import crc16

PREAMBLE = b"\xAA\x55"
HID_REPORT_SIZE = 64
CHUNK_SIZE = HID_REPORT_SIZE - 1
HEADER_SIZE = 4  # preamble(2) + size(2)
CHECKSUM_SIZE = 2


@dataclass
class Frame:
    """A decoded link message."""

    command: int
    payload: bytes

    def __repr__(self) -> str:
        return (
            f"Frame(command={chr(self.command)!r}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


def encode_message(command: int, payload: bytes = b"") -> bytes:
    """Encode a command and payload as a framed message (without report headers)."""
    body = bytes([command]) + payload
    size = len(body).to_bytes(2, "little")
    checksum = crc16(body).to_bytes(2, "little")
    return PREAMBLE + size + body + checksum


def build_reports(command: int, payload: bytes = b"") -> list[bytes]:
    """Split a framed message into 64-byte HID reports.

    Args:
        command: Single-byte command code.
        payload: Command-specific payload bytes.

    Returns:
        One report for short messages, several for long ones.
    """
    message = encode_message(command, payload)
    reports: list[bytes] = []
    for offset in range(0, len(message), CHUNK_SIZE):
        chunk = message[offset : offset + CHUNK_SIZE]
        reports.append(bytes([len(chunk)]) + chunk + b"\x00" * (CHUNK_SIZE - len(chunk)))
    return reports


def report_data(report: bytes) -> bytes:
    """Return the meaningful bytes of a single HID report."""
    if not report:
        return b""
    return bytes(report[1 : 1 + min(report[0], CHUNK_SIZE)])


def message_size(data: bytes) -> int | None:
    """Return the total framed size announced by the start of a message.

    Returns ``None`` if ``data`` is too short to hold the header or does
    not start with the preamble.
    """
    if len(data) < HEADER_SIZE or data[:2] != PREAMBLE:
        return None
    body_size = int.from_bytes(data[2:4], "little")
    return HEADER_SIZE + body_size + CHECKSUM_SIZE


def parse_message(data: bytes) -> Frame | None:
    """Decode an assembled message.

    Returns:
        A ``Frame``, or ``None`` if the preamble is missing, the message is
        truncated or the checksum fails.
    """
    total = message_size(data)
    if total is None or len(data) < total:
        return None

    body_size = total - HEADER_SIZE - CHECKSUM_SIZE
    if body_size < 1:
        return None

    body = data[HEADER_SIZE : HEADER_SIZE + body_size]
    expected_checksum = int.from_bytes(
        data[HEADER_SIZE + body_size : total], "little"
    )
    if crc16(body) != expected_checksum:
        return None

    return Frame(command=body[0], payload=bytes(body[1:]))


def parse_reports(reports: list[bytes]) -> Frame | None:
    """Reassemble a message from its HID reports and decode it."""
    return parse_message(b"".join(report_data(r) for r in reports))
