"""Tests for 16-bit byte order helpers."""

import pytest

from id100_mcp.protocol.byteorder import decode_u16, encode_u16, swap16


def test_swap16_inverts_bytes():
    """Swapping exchanges the high and low byte."""
    assert swap16(0x1234) == 0x3412
    assert swap16(0x0005) == 0x0500
    assert swap16(0xFF00) == 0x00FF


def test_swap16_is_an_involution():
    """Swapping twice gives back every 16-bit value."""
    for value in range(0x10000):
        assert swap16(swap16(value)) == value


def test_encode_is_big_endian():
    """Fields go out most significant byte first."""
    assert encode_u16(5) == b"\x00\x05"
    assert encode_u16(0x1234) == b"\x12\x34"


def test_decode_is_big_endian():
    """Fields come back most significant byte first, at any offset."""
    assert decode_u16(b"\x00\x07") == 7
    assert decode_u16(b"\xAA\x01\x02", 1) == 0x0102


def test_encode_bounds():
    """Values outside 16 bits should raise."""
    with pytest.raises(ValueError):
        encode_u16(0x10000)
    with pytest.raises(ValueError):
        encode_u16(-1)
