"""Appointment table.

The device stores a fixed table of 16 appointments, 5 bytes each::

    | flags:u8 | month:u8 | day:u8 | hour:u8 | minute:u8 |

Bit 0 of ``flags`` enables the entry, the other bits are kept as-is.
``month`` or ``day`` 0 matches every month or day.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import ClassVar

from .fields import check_range, check_size

APPOINTMENT_COUNT = 16
FLAG_ENABLED = 0x01


@dataclass
class Appointment:
    """A single scheduled appointment."""

    SIZE: ClassVar[int] = 5
    flags: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0

    @property
    def enabled(self) -> bool:
        return bool(self.flags & FLAG_ENABLED)

    def to_bytes(self) -> bytes:
        return bytes([
            check_range("flags", self.flags, 0, 0xFF),
            check_range("month", self.month, 0, 12),
            check_range("day", self.day, 0, 31),
            check_range("hour", self.hour, 0, 23),
            check_range("minute", self.minute, 0, 59),
        ])

    @classmethod
    def from_bytes(cls, data: bytes) -> Appointment:
        check_size("Appointment", data, cls.SIZE)
        return cls(flags=data[0], month=data[1], day=data[2], hour=data[3], minute=data[4])

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Appointments:
    """The complete appointment table."""

    SIZE: ClassVar[int] = APPOINTMENT_COUNT * Appointment.SIZE
    entries: list[Appointment] = field(
        default_factory=lambda: [Appointment() for _ in range(APPOINTMENT_COUNT)]
    )

    def to_bytes(self) -> bytes:
        if len(self.entries) != APPOINTMENT_COUNT:
            raise ValueError(
                f"Appointment table must have {APPOINTMENT_COUNT} entries, "
                f"got {len(self.entries)}"
            )
        return b"".join(entry.to_bytes() for entry in self.entries)

    @classmethod
    def from_bytes(cls, data: bytes) -> Appointments:
        check_size("Appointments", data, cls.SIZE)
        return cls(entries=[
            Appointment.from_bytes(data[i : i + Appointment.SIZE])
            for i in range(0, cls.SIZE, Appointment.SIZE)
        ])

    @classmethod
    def from_list(cls, items: list[dict]) -> Appointments:
        """Build a table from dicts, padding with empty entries."""
        if len(items) > APPOINTMENT_COUNT:
            raise ValueError(
                f"At most {APPOINTMENT_COUNT} appointments, got {len(items)}"
            )
        entries = [Appointment(**item) for item in items]
        entries += [Appointment() for _ in range(APPOINTMENT_COUNT - len(entries))]
        return cls(entries=entries)

    def to_list(self) -> list[dict]:
        return [entry.to_dict() for entry in self.entries]
