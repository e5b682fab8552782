"""Flash-resident configuration pages.

Layout::

    +-------------+---------------------+
    | page_number |        data         |
    | u16 (BE)    |      64 bytes       |
    +-------------+---------------------+

The device echoes ``page_number`` in every flash reply; the driver
compares it with the page it asked for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from ..protocol.byteorder import decode_u16, encode_u16
from .fields import check_size

PAGE_DATA_SIZE = 64


@dataclass
class FlashConfigPage:
    """One configuration page as read from flash."""

    SIZE: ClassVar[int] = 2 + PAGE_DATA_SIZE
    page_number: int = 0
    data: bytes = field(default_factory=lambda: b"\xff" * PAGE_DATA_SIZE)

    def to_bytes(self) -> bytes:
        check_size("Page data", self.data, PAGE_DATA_SIZE)
        return encode_u16(self.page_number) + bytes(self.data)

    @classmethod
    def from_bytes(cls, data: bytes):
        check_size(cls.__name__, data, cls.SIZE)
        return cls(page_number=decode_u16(data), data=bytes(data[2:]))

    def to_dict(self) -> dict:
        return {"page_number": self.page_number, "data": self.data.hex()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(page_number={self.page_number})"


@dataclass(repr=False)
class FlashClockConfig(FlashConfigPage):
    """Clock configuration written to the flash page ``page_number``."""
