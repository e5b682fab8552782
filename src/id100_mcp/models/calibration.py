"""RTC calibration record and drift measurement.

The calibration value is a signed PPM correction carried as an IEEE-754
single precision float, little-endian::

    LastCalibration | DateTime (7 bytes) | ppm:f32 |
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from .clock import DateTime
from .fields import check_size

PPM_FORMAT = "<f"
PPM_SIZE = struct.calcsize(PPM_FORMAT)


def encode_ppm(value: float) -> bytes:
    return struct.pack(PPM_FORMAT, value)


def decode_ppm(data: bytes) -> float:
    return struct.unpack(PPM_FORMAT, data)[0]


@dataclass
class LastCalibration:
    """When the RTC was last calibrated and the correction applied then."""

    SIZE: ClassVar[int] = DateTime.SIZE + PPM_SIZE
    date_time: DateTime = field(default_factory=DateTime)
    ppm: float = 0.0

    def to_bytes(self) -> bytes:
        return self.date_time.to_bytes() + encode_ppm(self.ppm)

    @classmethod
    def from_bytes(cls, data: bytes) -> LastCalibration:
        check_size("LastCalibration", data, cls.SIZE)
        return cls(
            date_time=DateTime.from_bytes(data[: DateTime.SIZE]),
            ppm=decode_ppm(data[DateTime.SIZE :]),
        )

    def to_dict(self) -> dict:
        return {"date_time": str(self.date_time), "ppm": round(self.ppm, 3)}


def drift_ppm(device_time: datetime, reference_time: datetime, calibrated_at: datetime) -> float:
    """Measure how far the device clock ran off since its last calibration.

    Args:
        device_time: Time read from the device.
        reference_time: Accurate time taken at the same moment.
        calibrated_at: Time of the last calibration (when the device clock
            was last known to be exact).

    Returns:
        The drift in parts per million; positive when the device runs fast.

    Raises:
        ValueError: If ``reference_time`` is not after ``calibrated_at``.
    """
    elapsed = (reference_time - calibrated_at).total_seconds()
    if elapsed <= 0:
        raise ValueError(
            f"Reference time {reference_time} must be after calibration time {calibrated_at}"
        )
    offset = (device_time - reference_time).total_seconds()
    return offset / elapsed * 1e6
