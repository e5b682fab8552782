"""Field range checks shared by the record types."""

from __future__ import annotations


def check_range(name: str, value: int, low: int, high: int) -> int:
    """Return ``value`` if ``low <= value <= high``, else raise ``ValueError``."""
    if not low <= value <= high:
        raise ValueError(f"{name} must be {low}-{high}, got {value}")
    return value


def check_size(record: str, data: bytes, size: int) -> None:
    if len(data) != size:
        raise ValueError(f"{record} must be {size} bytes, got {len(data)}")
