"""Clock records: firmware version, date/time and standby schedule.

Layouts (all fields unsigned, multi-byte fields big-endian)::

    Version   | major:u16 | minor:u16 | revision:u16 |
    DateTime  | year-2000:u8 | month:u8 | day:u8 | weekday:u8 | hour:u8 | minute:u8 | second:u8 |
    Standby   | weekday_mask:u8 | off_hour:u8 | off_minute:u8 | on_hour:u8 | on_minute:u8 |
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar

from .fields import check_range, check_size

YEAR_BASE = 2000

WEEKDAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


@dataclass
class Version:
    """Firmware version reported by the device."""

    SIZE: ClassVar[int] = 6
    major: int = 0
    minor: int = 0
    revision: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> Version:
        check_size("Version", data, cls.SIZE)
        major, minor, revision = struct.unpack(">3H", data)
        return cls(major=major, minor=minor, revision=revision)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}"


@dataclass
class DateTime:
    """Date and time as kept by the battery-backed RTC.

    ``weekday`` is 1 (Monday) to 7 (Sunday).
    """

    SIZE: ClassVar[int] = 7
    year: int = YEAR_BASE
    month: int = 1
    day: int = 1
    weekday: int = 6
    hour: int = 0
    minute: int = 0
    second: int = 0

    def to_bytes(self) -> bytes:
        return bytes([
            check_range("year", self.year, YEAR_BASE, YEAR_BASE + 255) - YEAR_BASE,
            check_range("month", self.month, 1, 12),
            check_range("day", self.day, 1, 31),
            check_range("weekday", self.weekday, 1, 7),
            check_range("hour", self.hour, 0, 23),
            check_range("minute", self.minute, 0, 59),
            check_range("second", self.second, 0, 59),
        ])

    @classmethod
    def from_bytes(cls, data: bytes) -> DateTime:
        check_size("DateTime", data, cls.SIZE)
        return cls(
            year=YEAR_BASE + data[0], month=data[1], day=data[2],
            weekday=data[3], hour=data[4], minute=data[5], second=data[6],
        )

    @classmethod
    def from_datetime(cls, value: datetime) -> DateTime:
        return cls(
            year=value.year, month=value.month, day=value.day,
            weekday=value.isoweekday(), hour=value.hour,
            minute=value.minute, second=value.second,
        )

    def to_datetime(self) -> datetime:
        """Convert to a naive ``datetime``.

        Raises:
            ValueError: If the record does not hold a valid calendar date.
        """
        return datetime(
            self.year, self.month, self.day, self.hour, self.minute, self.second
        )

    def __str__(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d} "
            f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        )


@dataclass
class Standby:
    """Display standby schedule.

    The display is switched off at ``off_hour:off_minute`` and back on at
    ``on_hour:on_minute`` on every weekday whose bit is set in
    ``weekday_mask`` (bit 0 = Monday).
    """

    SIZE: ClassVar[int] = 5
    weekday_mask: int = 0
    off_hour: int = 0
    off_minute: int = 0
    on_hour: int = 0
    on_minute: int = 0

    @property
    def weekdays(self) -> list[str]:
        return [name for i, name in enumerate(WEEKDAY_NAMES) if self.weekday_mask & (1 << i)]

    @classmethod
    def mask_from_weekdays(cls, weekdays: list[str]) -> int:
        mask = 0
        for name in weekdays:
            key = name.lower()[:3]
            if key not in WEEKDAY_NAMES:
                raise ValueError(f"Unknown weekday '{name}'. Valid: {WEEKDAY_NAMES}")
            mask |= 1 << WEEKDAY_NAMES.index(key)
        return mask

    def to_bytes(self) -> bytes:
        return bytes([
            check_range("weekday_mask", self.weekday_mask, 0, 0x7F),
            check_range("off_hour", self.off_hour, 0, 23),
            check_range("off_minute", self.off_minute, 0, 59),
            check_range("on_hour", self.on_hour, 0, 23),
            check_range("on_minute", self.on_minute, 0, 59),
        ])

    @classmethod
    def from_bytes(cls, data: bytes) -> Standby:
        check_size("Standby", data, cls.SIZE)
        return cls(
            weekday_mask=data[0], off_hour=data[1], off_minute=data[2],
            on_hour=data[3], on_minute=data[4],
        )

    def to_dict(self) -> dict:
        return {
            "weekdays": self.weekdays,
            "off": f"{self.off_hour:02d}:{self.off_minute:02d}",
            "on": f"{self.on_hour:02d}:{self.on_minute:02d}",
        }
