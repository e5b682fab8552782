"""Synchronous command/response exchange with reply validation."""

from __future__ import annotations

import logging
from typing import Callable

from ..errors import ProtocolMismatchError
from ..transport.base import Link
from .commands import command_name

logger = logging.getLogger(__name__)

ReplyValidator = Callable[[bytes], None]


class Transceiver:
    """Performs one request/reply exchange per call over a link.

    The transceiver does not know the meaning of any command. It checks
    that the reply carries the same command byte and exactly the expected
    number of bytes, then hands content checks to an optional validator.
    """

    def __init__(self, link: Link) -> None:
        self._link = link

    def transceive(
        self,
        command: int,
        request: bytes = b"",
        reply_length: int = 0,
        validate: ReplyValidator | None = None,
    ) -> bytes:
        """Send ``command`` with ``request`` and return the validated reply.

        Args:
            command: Command byte.
            request: Request payload, possibly empty.
            reply_length: Exact number of payload bytes the reply must carry.
            validate: Called with the reply payload after the length check.
                It raises to reject the reply.

        Returns:
            The reply payload.

        Raises:
            ProtocolMismatchError: If the reply command or length is wrong,
                or ``validate`` rejects the payload.
        """
        logger.debug(
            "-> '%s' %s", command_name(command), request.hex(" ") or "(empty)"
        )
        self._link.send_command_and_buffer(int(command), bytes(request))
        reply_command, reply = self._link.receive_command_and_buffer(reply_length)
        logger.debug(
            "<- '%s' %s", command_name(reply_command), reply.hex(" ") or "(empty)"
        )

        if reply_command != command:
            raise ProtocolMismatchError(
                "command",
                reply_command,
                f"Invalid answer command received: '{command_name(reply_command)}'",
            )
        if len(reply) != reply_length:
            raise ProtocolMismatchError(
                "length", len(reply), f"Invalid length received: {len(reply)}"
            )
        if validate is not None:
            validate(reply)
        return bytes(reply)
