"""Preview bitmap for the LED matrix.

The matrix has 10 rows of 11 columns. Each row is a big-endian 16-bit word
with the leftmost column in bit 15; the low 5 bits are unused.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

from .fields import check_range, check_size

ROWS = 10
COLUMNS = 11
_ROW_MASK = ((1 << COLUMNS) - 1) << (16 - COLUMNS)


@dataclass
class MatrixBitmap:
    """A full-screen preview image."""

    SIZE: ClassVar[int] = ROWS * 2
    rows: list[int] = field(default_factory=lambda: [0] * ROWS)

    def _bit(self, row: int, column: int) -> int:
        check_range("row", row, 0, ROWS - 1)
        check_range("column", column, 0, COLUMNS - 1)
        return 1 << (15 - column)

    def get_pixel(self, row: int, column: int) -> bool:
        bit = self._bit(row, column)
        return bool(self.rows[row] & bit)

    def set_pixel(self, row: int, column: int, on: bool = True) -> None:
        bit = self._bit(row, column)
        if on:
            self.rows[row] |= bit
        else:
            self.rows[row] &= ~bit

    def to_bytes(self) -> bytes:
        if len(self.rows) != ROWS:
            raise ValueError(f"Matrix must have {ROWS} rows, got {len(self.rows)}")
        return struct.pack(f">{ROWS}H", *(row & _ROW_MASK for row in self.rows))

    @classmethod
    def from_bytes(cls, data: bytes) -> MatrixBitmap:
        check_size("MatrixBitmap", data, cls.SIZE)
        return cls(rows=list(struct.unpack(f">{ROWS}H", data)))

    @classmethod
    def from_strings(cls, lines: list[str]) -> MatrixBitmap:
        """Build a bitmap from text art, ``#`` (or ``X``/``1``) marks a lit pixel.

        Missing rows and columns are left dark.
        """
        if len(lines) > ROWS:
            raise ValueError(f"Matrix has {ROWS} rows, got {len(lines)}")
        bitmap = cls()
        for row, line in enumerate(lines):
            if len(line) > COLUMNS:
                raise ValueError(
                    f"Row {row} has {len(line)} columns, matrix has {COLUMNS}"
                )
            for column, char in enumerate(line):
                if char in "#Xx1":
                    bitmap.set_pixel(row, column)
        return bitmap

    def to_strings(self) -> list[str]:
        return [
            "".join("#" if self.get_pixel(r, c) else "." for c in range(COLUMNS))
            for r in range(ROWS)
        ]
