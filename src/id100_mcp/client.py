"""Application layer: one method per device operation.

Each method is a single, complete request/reply exchange through the
:class:`~id100_mcp.protocol.transceiver.Transceiver`. Operations that
modify flash get their page number echoed back and verify it.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from .errors import ProtocolMismatchError
from .models.appointments import Appointments
from .models.calibration import LastCalibration, encode_ppm
from .models.clock import DateTime, Standby, Version
from .models.flash import FlashClockConfig, FlashConfigPage
from .models.matrix import MatrixBitmap
from .protocol.byteorder import decode_u16, encode_u16
from .protocol.commands import Command
from .protocol.transceiver import ReplyValidator, Transceiver
from .transport.base import Link

logger = logging.getLogger(__name__)

# Largest RTC correction the device accepts, in PPM
PPM_LIMIT = 189.0


def clamp_ppm(value: float) -> float:
    """Saturate a calibration value to +/- ``PPM_LIMIT``.

    Raises:
        ValueError: If ``value`` is NaN.
    """
    if math.isnan(value):
        raise ValueError("Calibration value must be a number, got NaN")
    if value > PPM_LIMIT:
        return PPM_LIMIT
    if value < -PPM_LIMIT:
        return -PPM_LIMIT
    return float(value)


def _expect_page(page_number: int) -> ReplyValidator:
    """Reply validator checking the page number echoed at the start of a reply."""

    def validate(reply: bytes) -> None:
        echoed = decode_u16(reply)
        if echoed != page_number:
            raise ProtocolMismatchError(
                "page", echoed, f"Bad page number received: {echoed}"
            )

    return validate


class ID100Client:
    """Driver for one ID100 reachable through ``link``.

    Usage::

        client = ID100Client(USBConnection())
        client.connect()
        print(client.get_version())
        client.disconnect()
    """

    def __init__(self, link: Link) -> None:
        self._link = link
        self._transceiver = Transceiver(link)

    @property
    def link(self) -> Link:
        return self._link

    def connect(self, context: Any = None) -> None:
        """Open the underlying link."""
        self._link.connect(context)

    def disconnect(self) -> None:
        """Close the underlying link."""
        self._link.disconnect()

    # ─── IDENTIFICATION / MODES ───────────────────────────────────────

    def get_version(self) -> Version:
        """Read the firmware version."""
        reply = self._transceiver.transceive(Command.GET_VERSION, reply_length=Version.SIZE)
        return Version.from_bytes(reply)

    def set_normal_mode(self) -> None:
        self._transceiver.transceive(Command.SET_NORMAL_MODE)

    def set_preview_mode(self) -> None:
        self._transceiver.transceive(Command.SET_PREVIEW_MODE)

    def factory_reset(self) -> None:
        self._transceiver.transceive(Command.FACTORY_RESET)

    def activate_bootloader(self) -> None:
        """Restart the device into its bootloader."""
        self._transceiver.transceive(Command.ACTIVATE_BOOTLOADER)

    # ─── TIME ─────────────────────────────────────────────────────────

    def get_date_time(self) -> DateTime:
        reply = self._transceiver.transceive(Command.GET_DATE_TIME, reply_length=DateTime.SIZE)
        return DateTime.from_bytes(reply)

    def set_date_time(self, date_time: DateTime) -> None:
        self._transceiver.transceive(Command.SET_DATE_TIME, date_time.to_bytes())

    def get_last_calibration(self) -> LastCalibration:
        reply = self._transceiver.transceive(
            Command.GET_LAST_CALIBRATION, reply_length=LastCalibration.SIZE
        )
        return LastCalibration.from_bytes(reply)

    def set_rtc_calibration(self, ppm_difference: float) -> float:
        """Send an RTC correction in PPM.

        Values beyond +/- ``PPM_LIMIT`` are saturated, not rejected.

        Returns:
            The value actually transmitted.
        """
        value = clamp_ppm(ppm_difference)
        if value != ppm_difference:
            logger.info("Calibration %.3f ppm limited to %.1f ppm", ppm_difference, value)
        self._transceiver.transceive(Command.SET_RTC_CALIBRATION, encode_ppm(value))
        return value

    def get_standby(self) -> Standby:
        reply = self._transceiver.transceive(Command.GET_STANDBY, reply_length=Standby.SIZE)
        return Standby.from_bytes(reply)

    def set_standby(self, standby: Standby) -> None:
        self._transceiver.transceive(Command.SET_STANDBY, standby.to_bytes())

    # ─── DISPLAY ──────────────────────────────────────────────────────

    def set_preview_matrix(self, matrix: MatrixBitmap) -> None:
        """Show ``matrix`` while the device is in preview mode."""
        self._transceiver.transceive(Command.SET_PREVIEW_MATRIX, matrix.to_bytes())

    def get_intensity(self) -> int:
        reply = self._transceiver.transceive(Command.GET_INTENSITY, reply_length=1)
        return reply[0]

    def set_intensity(self, intensity: int) -> None:
        """Set the standard display intensity.

        Args:
            intensity: Level 0-255.
        """
        if not 0 <= intensity <= 255:
            raise ValueError(f"Intensity must be 0-255, got {intensity}")
        self._transceiver.transceive(Command.SET_INTENSITY, bytes([intensity]))

    # ─── FLASH CONFIGURATION ──────────────────────────────────────────

    def get_flash_config_page(self, page_number: int) -> FlashConfigPage:
        """Read one flash configuration page.

        Raises:
            ProtocolMismatchError: If the device answers with another page.
        """
        reply = self._transceiver.transceive(
            Command.GET_FLASH_CONFIG_PAGE,
            encode_u16(page_number),
            FlashConfigPage.SIZE,
            validate=_expect_page(page_number),
        )
        return FlashConfigPage.from_bytes(reply)

    def erase_flash_config_sector(self, start_page: int) -> None:
        """Erase the flash sector starting at ``start_page``.

        Raises:
            ProtocolMismatchError: If the device reports another page erased.
        """
        self._transceiver.transceive(
            Command.ERASE_FLASH_CONFIG_SECTOR,
            encode_u16(start_page),
            2,
            validate=_expect_page(start_page),
        )

    def set_flash_clock_config(self, config: FlashClockConfig) -> None:
        """Write a clock configuration page.

        Raises:
            ProtocolMismatchError: If the device reports another page written.
        """
        self._transceiver.transceive(
            Command.SET_FLASH_CLOCK_CONFIG,
            config.to_bytes(),
            2,
            validate=_expect_page(config.page_number),
        )

    # ─── APPOINTMENTS ─────────────────────────────────────────────────

    def get_appointments(self) -> Appointments:
        reply = self._transceiver.transceive(
            Command.GET_APPOINTMENTS, reply_length=Appointments.SIZE
        )
        return Appointments.from_bytes(reply)

    def set_appointments(self, appointments: Appointments) -> None:
        self._transceiver.transceive(Command.SET_APPOINTMENTS, appointments.to_bytes())
