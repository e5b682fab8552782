"""Exceptions raised by the ID100 driver."""

from __future__ import annotations


class ID100Error(Exception):
    """Base class for driver errors."""


class ProtocolMismatchError(ID100Error):
    """The device reply does not match the request.

    Raised when the reply command differs from the request command, when the
    reply length differs from the expected length, or when an echoed field
    (a flash page number) differs from the value sent.

    Attributes:
        kind: ``"command"``, ``"length"`` or ``"page"``.
        value: The unexpected value that was received.
    """

    def __init__(self, kind: str, value: int, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.value = value
