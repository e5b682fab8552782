"""Tests for CRC-16 calculation."""

from id100_mcp.utils.crc import crc16


def test_crc16_empty():
    """CRC of empty data should be the inverted initial value."""
    assert crc16(b"") == 0xFFFF


def test_crc16_check_value():
    """CRC-16/XMODEM of the standard check string is 0x31C3, sent inverted."""
    assert crc16(b"123456789") == 0x31C3 ^ 0xFFFF


def test_crc16_single_command_byte():
    """CRC of a lone command byte stays within 16 bits."""
    result = crc16(b"v")
    assert 0 <= result <= 0xFFFF


def test_crc16_different_inputs():
    """Different inputs should produce different CRCs."""
    assert crc16(b"t") != crc16(b"T")
