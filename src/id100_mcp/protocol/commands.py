"""Command codes understood by the device.

Every exchange is identified by a single ASCII byte. Lower case letters
read from the device, upper case letters write to it.
"""

from __future__ import annotations

from enum import IntEnum


class Command(IntEnum):
    """Command byte identifiers."""

    GET_VERSION = ord("v")
    GET_DATE_TIME = ord("t")
    SET_DATE_TIME = ord("T")
    SET_NORMAL_MODE = ord("A")
    SET_PREVIEW_MODE = ord("a")
    FACTORY_RESET = ord("X")
    ACTIVATE_BOOTLOADER = ord("!")
    SET_PREVIEW_MATRIX = ord("D")
    GET_INTENSITY = ord("b")
    SET_INTENSITY = ord("B")
    GET_LAST_CALIBRATION = ord("c")
    SET_RTC_CALIBRATION = ord("C")
    GET_STANDBY = ord("s")
    SET_STANDBY = ord("S")
    GET_FLASH_CONFIG_PAGE = ord("f")
    ERASE_FLASH_CONFIG_SECTOR = ord("E")
    SET_FLASH_CLOCK_CONFIG = ord("F")
    GET_APPOINTMENTS = ord("r")
    SET_APPOINTMENTS = ord("R")


def command_name(value: int) -> str:
    """Printable form of a command byte for log and error messages."""
    if 0x20 <= value < 0x7F:
        return chr(value)
    return f"0x{value:02X}"
