"""Tests for link-layer report building and parsing."""

from id100_mcp.protocol.framing import (
    CHUNK_SIZE,
    HID_REPORT_SIZE,
    PREAMBLE,
    Frame,
    build_reports,
    encode_message,
    message_size,
    parse_message,
    parse_reports,
    report_data,
)
from id100_mcp.utils.crc import crc16


def test_single_report_layout():
    """Verify report structure for set intensity 0x80.

    Structure: [hid_size] AA 55 [size_lo size_hi] [cmd] [payload] [crc_lo crc_hi]
    """
    reports = build_reports(ord("B"), b"\x80")
    assert len(reports) == 1
    report = reports[0]
    assert len(report) == HID_REPORT_SIZE
    assert report[0] == 0x08  # preamble(2) + size(2) + cmd(1) + payload(1) + crc(2)
    assert report[1:3] == PREAMBLE
    assert report[3] == 0x02  # size low byte
    assert report[4] == 0x00  # size high byte
    assert report[5] == ord("B")
    assert report[6] == 0x80
    expected_crc = crc16(bytes([ord("B"), 0x80]))
    assert report[7] == expected_crc & 0xFF
    assert report[8] == (expected_crc >> 8) & 0xFF
    assert report[9:] == b"\x00" * (HID_REPORT_SIZE - 9)


def test_roundtrip_empty_payload():
    """Commands with no payload should round-trip."""
    frame = parse_reports(build_reports(ord("v")))
    assert frame is not None
    assert frame.command == ord("v")
    assert frame.payload == b""


def test_long_message_is_chunked():
    """An appointment table needs several reports, all 64 bytes."""
    payload = bytes(range(80))
    reports = build_reports(ord("R"), payload)
    assert len(reports) == 2
    for report in reports:
        assert len(report) == HID_REPORT_SIZE
    assert reports[0][0] == CHUNK_SIZE
    assert reports[1][0] == len(encode_message(ord("R"), payload)) - CHUNK_SIZE

    frame = parse_reports(reports)
    assert frame is not None
    assert frame.command == ord("R")
    assert frame.payload == payload


def test_message_size_from_header():
    """The announced size covers header, body and checksum."""
    message = encode_message(ord("f"), b"\x00\x05")
    assert message_size(message[:4]) == len(message)
    assert message_size(message[:3]) is None


def test_parse_invalid_preamble():
    """Messages with wrong preamble should return None."""
    message = bytearray(encode_message(ord("v")))
    message[0] = 0xBB
    assert parse_message(bytes(message)) is None


def test_parse_bad_checksum():
    """Messages with corrupt checksum should return None."""
    message = bytearray(encode_message(ord("B"), b"\x10"))
    message[-1] ^= 0xFF
    assert parse_message(bytes(message)) is None


def test_parse_truncated_message():
    """A message shorter than its announced size is rejected."""
    message = encode_message(ord("r"), bytes(80))
    assert parse_message(message[:-3]) is None


def test_report_data_strips_padding():
    """Only the announced number of bytes is taken from a report."""
    report = build_reports(ord("v"))[0]
    assert report_data(report) == encode_message(ord("v"))
    assert report_data(b"") == b""


def test_frame_repr():
    """Frame repr shows the command letter."""
    r = repr(Frame(command=ord("E"), payload=b"\x00\x05"))
    assert "'E'" in r
    assert "00 05" in r
