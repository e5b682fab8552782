"""USB HID link to the ID100.

Supports both ``hidapi`` (preferred) and ``pyusb`` backends. Messages are
framed by :mod:`id100_mcp.protocol.framing` and exchanged as 64-byte
interrupt reports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..protocol.framing import (
    HID_REPORT_SIZE,
    build_reports,
    message_size,
    parse_message,
    report_data,
)
from .base import Link

logger = logging.getLogger(__name__)

VENDOR_ID = 0x16C0
PRODUCT_ID = 0x05DF
HID_INTERFACE = 0
EP_IN = 0x81
EP_OUT = 0x01
READ_TIMEOUT_MS = 1000


@dataclass
class DeviceInfo:
    """Basic device identification from USB descriptors."""

    vendor_id: int = VENDOR_ID
    product_id: int = PRODUCT_ID
    manufacturer: str = ""
    product: str = ""
    path: str = ""


class USBConnection(Link):
    """Manages the USB HID connection to the clock.

    Usage::

        conn = USBConnection()
        conn.connect()
        conn.send_command_and_buffer(ord("v"))
        command, payload = conn.receive_command_and_buffer(6)
        conn.disconnect()
    """

    def __init__(
        self,
        vendor_id: int = VENDOR_ID,
        product_id: int = PRODUCT_ID,
        timeout_ms: int = READ_TIMEOUT_MS,
    ) -> None:
        self._vendor_id = vendor_id
        self._product_id = product_id
        self._timeout_ms = timeout_ms
        self._device = None
        self._backend: str = ""
        self._connected = False
        self._device_info = DeviceInfo(vendor_id=vendor_id, product_id=product_id)

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def device_info(self) -> DeviceInfo:
        return self._device_info

    def connect(self, context: Any = None) -> None:
        """Open a connection to the clock, trying hidapi first, then pyusb.

        Args:
            context: Optional hidapi device path. When omitted the first
                device matching the vendor/product ID is opened.

        Raises:
            ConnectionError: If the device cannot be found or opened.
        """
        try:
            self._open_hidapi(context)
            return
        except Exception as e:
            if context:
                raise ConnectionError(
                    f"Could not open ID100 at {context!r}: {e}"
                ) from e
            logger.debug("hidapi backend failed: %s, trying pyusb", e)

        try:
            self._open_pyusb()
        except Exception as e:
            raise ConnectionError(
                f"Could not connect to ID100 "
                f"({self._vendor_id:#06x}:{self._product_id:#06x}). "
                f"Ensure the device is connected and you have permissions. "
                f"Last error: {e}"
            ) from e

    def _open_hidapi(self, path: Any = None) -> None:
        """Open using the hidapi library."""
        import hid

        device = hid.device()
        if path:
            device.open_path(path.encode() if isinstance(path, str) else path)
        else:
            device.open(self._vendor_id, self._product_id)
        device.set_nonblocking(False)

        self._device = device
        self._backend = "hidapi"
        self._connected = True
        self._device_info = DeviceInfo(
            vendor_id=self._vendor_id,
            product_id=self._product_id,
            manufacturer=device.get_manufacturer_string() or "",
            product=device.get_product_string() or "",
            path=path.decode() if isinstance(path, bytes) else (path or ""),
        )

        logger.info(
            "Connected via hidapi: %s %s",
            self._device_info.manufacturer,
            self._device_info.product,
        )

    def _open_pyusb(self) -> None:
        """Open using pyusb + libusb."""
        import usb.core
        import usb.util

        dev = usb.core.find(idVendor=self._vendor_id, idProduct=self._product_id)
        if dev is None:
            raise ConnectionError("Device not found via pyusb")

        if dev.is_kernel_driver_active(HID_INTERFACE):
            dev.detach_kernel_driver(HID_INTERFACE)

        usb.util.claim_interface(dev, HID_INTERFACE)

        self._device = dev
        self._backend = "pyusb"
        self._connected = True
        self._device_info = DeviceInfo(
            vendor_id=self._vendor_id,
            product_id=self._product_id,
            manufacturer=usb.util.get_string(dev, dev.iManufacturer) or "",
            product=usb.util.get_string(dev, dev.iProduct) or "",
        )

        logger.info(
            "Connected via pyusb: %s %s",
            self._device_info.manufacturer,
            self._device_info.product,
        )

    def disconnect(self) -> None:
        """Close the USB connection."""
        if not self._connected:
            return

        try:
            if self._backend == "hidapi":
                self._device.close()
            elif self._backend == "pyusb":
                import usb.util
                usb.util.release_interface(self._device, HID_INTERFACE)
        except Exception as e:
            logger.warning("Error closing device: %s", e)
        finally:
            self._device = None
            self._connected = False
            logger.info("Disconnected")

    def _write_report(self, report: bytes) -> int:
        if self._backend == "hidapi":
            # hidapi expects the report ID as the first byte
            return self._device.write(b"\x00" + report)
        elif self._backend == "pyusb":
            return self._device.write(EP_OUT, report, timeout=self._timeout_ms)
        else:
            raise RuntimeError(f"Unknown backend: {self._backend}")

    def _read_report(self) -> bytes | None:
        """Read one report, or ``None`` if the read timed out.

        Raises:
            ConnectionError: If the device fails or disappears during the read.
        """
        if self._backend == "hidapi":
            try:
                data = self._device.read(HID_REPORT_SIZE, self._timeout_ms)
            except (OSError, ValueError) as e:
                raise ConnectionError(f"Read from device failed: {e}") from e
            # hidapi returns an empty read on timeout
            if data:
                return bytes(data)
            return None
        elif self._backend == "pyusb":
            import usb.core

            try:
                data = self._device.read(EP_IN, HID_REPORT_SIZE, timeout=self._timeout_ms)
            except usb.core.USBTimeoutError:
                return None
            except usb.core.USBError as e:
                raise ConnectionError(f"Read from device failed: {e}") from e
            return bytes(data)
        else:
            raise RuntimeError(f"Unknown backend: {self._backend}")

    def send_command_and_buffer(self, command: int, buffer: bytes = b"") -> None:
        """Frame and write a command with its payload.

        Raises:
            ConnectionError: If not connected.
        """
        if not self._connected:
            raise ConnectionError("Not connected to device")

        for report in build_reports(command, buffer):
            self._write_report(report)

    def receive_command_and_buffer(self, max_length: int) -> tuple[int, bytes]:
        """Read reports until a complete message is assembled.

        Args:
            max_length: Payload size the caller expects. Longer replies are
                returned whole so the caller can reject them.

        Returns:
            The reply command byte and payload.

        Raises:
            ConnectionError: If not connected or the device is lost.
            TimeoutError: If the device does not answer in time.
            IOError: If the message is malformed or fails its checksum.
        """
        if not self._connected:
            raise ConnectionError("Not connected to device")

        assembled = b""
        total = None
        while total is None or len(assembled) < total:
            report = self._read_report()
            if report is None:
                raise TimeoutError(
                    f"No reply from device within {self._timeout_ms} ms"
                )
            assembled += report_data(report)
            if total is None:
                total = message_size(assembled)
                if total is None and len(assembled) >= 4:
                    raise IOError(f"Malformed reply: {assembled.hex(' ')}")

        frame = parse_message(assembled[:total])
        if frame is None:
            raise IOError("Reply failed checksum verification")
        if len(frame.payload) > max_length:
            logger.debug(
                "Reply payload of %d bytes exceeds expected %d bytes",
                len(frame.payload), max_length,
            )
        return frame.command, frame.payload
