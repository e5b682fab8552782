"""Contract between the protocol layer and a physical link."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Link(ABC):
    """A connection that carries ``(command, buffer)`` messages.

    Implementations own the physical channel and its framing. Calls are
    blocking and must not be interleaved: each send is followed by exactly
    one receive before the next send.
    """

    @property
    @abstractmethod
    def connected(self) -> bool:
        """Whether the connection is open."""

    @abstractmethod
    def connect(self, context: Any = None) -> None:
        """Open the connection. ``context`` is implementation specific."""

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection."""

    @abstractmethod
    def send_command_and_buffer(self, command: int, buffer: bytes = b"") -> None:
        """Transmit one command byte and its payload."""

    @abstractmethod
    def receive_command_and_buffer(self, max_length: int) -> tuple[int, bytes]:
        """Block until a full reply arrives and return ``(command, payload)``."""
