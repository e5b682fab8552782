"""MCP server entry point for the ID100 clock.

Exposes tools, resources, and prompts via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import ID100Client
from .models.appointments import Appointments
from .models.calibration import drift_ppm
from .models.clock import DateTime, Standby
from .models.file_formats import export_appointments as write_appointments_file
from .models.file_formats import import_appointments as read_appointments_file
from .models.flash import FlashClockConfig
from .models.matrix import MatrixBitmap
from .transport.usb_connection import USBConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "id100",
    instructions="MCP server for the ID100 real-time clock and LED matrix display",
)

# Global connection state
_client: ID100Client | None = None


def _get_client() -> ID100Client:
    """Get the connected client, raising if not connected."""
    if _client is None or not _client.link.connected:
        raise RuntimeError(
            "Not connected to device. Use the 'connect' tool first."
        )
    return _client


def _parse_hhmm(value: str) -> tuple[int, int]:
    try:
        hour, minute = value.split(":")
        return int(hour), int(minute)
    except ValueError as e:
        raise ValueError(f"Time must be HH:MM, got '{value}'") from e


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(path: str | None = None) -> dict[str, Any]:
    """Establish a USB connection to the ID100.

    Auto-discovers the device by USB vendor/product ID unless a HID device
    path is given, then reads the firmware version to confirm the device.

    Args:
        path: Optional hidapi device path.
    """
    global _client
    if _client is not None and _client.link.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "model": _client.link.device_info.product,
        }

    client = ID100Client(USBConnection())
    client.connect(path)
    _client = client

    info = client.link.device_info
    return {
        "connected": True,
        "model": info.product,
        "manufacturer": info.manufacturer,
        "firmware": str(client.get_version()),
    }


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the USB connection to the clock."""
    global _client
    if _client is None:
        return {"disconnected": True}
    _client.disconnect()
    _client = None
    return {"disconnected": True}


@mcp.tool()
def get_version() -> dict[str, Any]:
    """Read the firmware version (major, minor, revision)."""
    version = _get_client().get_version()
    return {
        "version": str(version),
        "major": version.major,
        "minor": version.minor,
        "revision": version.revision,
    }


# ─── MODE TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def set_normal_mode() -> dict[str, str]:
    """Return the display to normal clock operation."""
    _get_client().set_normal_mode()
    return {"mode": "normal"}


@mcp.tool()
def set_preview_mode() -> dict[str, str]:
    """Switch the display to preview mode (shows the preview matrix)."""
    _get_client().set_preview_mode()
    return {"mode": "preview"}


@mcp.tool()
def factory_reset() -> dict[str, bool]:
    """Restore the device's factory configuration."""
    _get_client().factory_reset()
    return {"reset": True}


@mcp.tool()
def activate_bootloader() -> dict[str, bool]:
    """Restart the device into its firmware bootloader.

    The USB connection is closed afterwards since the device re-enumerates.
    """
    global _client
    client = _get_client()
    client.activate_bootloader()
    client.disconnect()
    _client = None
    return {"bootloader": True}


# ─── TIME TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def get_date_time() -> dict[str, Any]:
    """Read the device's date and time."""
    date_time = _get_client().get_date_time()
    return {"date_time": str(date_time), "weekday": date_time.weekday}


@mcp.tool()
def set_date_time(value: str) -> dict[str, Any]:
    """Set the device's date and time.

    Args:
        value: ISO 8601 date and time, e.g. "2026-10-18T14:30:00".
    """
    date_time = DateTime.from_datetime(datetime.fromisoformat(value))
    _get_client().set_date_time(date_time)
    return {"date_time": str(date_time)}


@mcp.tool()
def sync_date_time() -> dict[str, Any]:
    """Set the device's date and time from the host clock."""
    date_time = DateTime.from_datetime(datetime.now())
    _get_client().set_date_time(date_time)
    return {"date_time": str(date_time)}


@mcp.tool()
def get_last_calibration() -> dict[str, Any]:
    """Read when the RTC was last calibrated and the correction applied."""
    return _get_client().get_last_calibration().to_dict()


@mcp.tool()
def set_rtc_calibration(ppm: float) -> dict[str, Any]:
    """Send an RTC correction in parts per million.

    Values beyond +/-189 ppm are limited to that range.

    Args:
        ppm: Measured clock difference in PPM (positive = device runs fast).
    """
    sent = _get_client().set_rtc_calibration(ppm)
    return {"requested": ppm, "ppm": sent, "limited": sent != ppm}


@mcp.tool()
def calibrate() -> dict[str, Any]:
    """Calibrate the RTC against the host clock.

    Compares the device time with the host time, computes the drift since
    the last calibration, sends it as the correction and then resets the
    device time from the host clock. The host clock should be NTP-synced.
    """
    client = _get_client()
    last = client.get_last_calibration()
    device_time = client.get_date_time().to_datetime()
    reference_time = datetime.now().replace(microsecond=0)

    drift = drift_ppm(device_time, reference_time, last.date_time.to_datetime())
    logger.info(
        "Device off by %.0f s since %s: %.3f ppm",
        (device_time - reference_time).total_seconds(),
        last.date_time,
        drift,
    )
    sent = client.set_rtc_calibration(drift)
    client.set_date_time(DateTime.from_datetime(datetime.now()))

    return {
        "last_calibration": str(last.date_time),
        "offset_seconds": (device_time - reference_time).total_seconds(),
        "drift_ppm": round(drift, 3),
        "ppm": sent,
    }


@mcp.tool()
def get_standby() -> dict[str, Any]:
    """Read the display standby schedule."""
    return _get_client().get_standby().to_dict()


@mcp.tool()
def set_standby(weekdays: list[str], off: str, on: str) -> dict[str, Any]:
    """Set the display standby schedule.

    Args:
        weekdays: Days the schedule applies to, e.g. ["mon", "tue"].
        off: Time the display switches off, "HH:MM".
        on: Time the display switches back on, "HH:MM".
    """
    off_hour, off_minute = _parse_hhmm(off)
    on_hour, on_minute = _parse_hhmm(on)
    standby = Standby(
        weekday_mask=Standby.mask_from_weekdays(weekdays),
        off_hour=off_hour, off_minute=off_minute,
        on_hour=on_hour, on_minute=on_minute,
    )
    _get_client().set_standby(standby)
    return standby.to_dict()


# ─── DISPLAY TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def set_preview_matrix(rows: list[str]) -> dict[str, Any]:
    """Load a bitmap into the preview matrix.

    Args:
        rows: Up to 10 strings of up to 11 characters; '#' lights a pixel,
              any other character leaves it dark.
    """
    matrix = MatrixBitmap.from_strings(rows)
    _get_client().set_preview_matrix(matrix)
    return {"rows": matrix.to_strings()}


@mcp.tool()
def get_intensity() -> dict[str, int]:
    """Read the standard display intensity."""
    return {"intensity": _get_client().get_intensity()}


@mcp.tool()
def set_intensity(intensity: int) -> dict[str, int]:
    """Set the standard display intensity.

    Args:
        intensity: Level 0-255.
    """
    _get_client().set_intensity(intensity)
    return {"intensity": intensity}


# ─── FLASH CONFIGURATION TOOLS ───────────────────────────────────────

@mcp.tool()
def get_flash_config_page(page: int) -> dict[str, Any]:
    """Read a flash configuration page.

    Args:
        page: Page number (0-65535).
    """
    return _get_client().get_flash_config_page(page).to_dict()


@mcp.tool()
def erase_flash_config_sector(start_page: int) -> dict[str, Any]:
    """Erase the flash configuration sector starting at a page.

    Args:
        start_page: First page of the sector.
    """
    _get_client().erase_flash_config_sector(start_page)
    return {"erased": True, "start_page": start_page}


@mcp.tool()
def set_flash_clock_config(page: int, data: str) -> dict[str, Any]:
    """Write a clock configuration page to flash.

    Args:
        page: Target page number.
        data: Page contents as 64 bytes of hex.
    """
    config = FlashClockConfig(page_number=page, data=bytes.fromhex(data))
    _get_client().set_flash_clock_config(config)
    return {"written": True, "page": page}


# ─── APPOINTMENT TOOLS ───────────────────────────────────────────────

@mcp.tool()
def get_appointments() -> dict[str, Any]:
    """Read the appointment table."""
    return {"appointments": _get_client().get_appointments().to_list()}


@mcp.tool()
def set_appointments(appointments: list[dict[str, int]]) -> dict[str, Any]:
    """Replace the appointment table.

    Args:
        appointments: Up to 16 entries with flags, month, day, hour, minute.
                      Missing entries are cleared.
    """
    table = Appointments.from_list(appointments)
    _get_client().set_appointments(table)
    return {"stored": True, "count": sum(1 for a in table.entries if a.enabled)}


@mcp.tool()
def export_appointments(output_path: str) -> dict[str, Any]:
    """Download the appointment table to a JSON file.

    Args:
        output_path: File path for the export.
    """
    table = _get_client().get_appointments()
    path = write_appointments_file(table, output_path)
    return {"path": str(path), "enabled": sum(1 for a in table.entries if a.enabled)}


@mcp.tool()
def import_appointments(input_path: str) -> dict[str, Any]:
    """Upload an appointment table from a JSON file.

    Args:
        input_path: Path to a file written by export_appointments.
    """
    table = read_appointments_file(input_path)
    _get_client().set_appointments(table)
    return {"imported": True, "enabled": sum(1 for a in table.entries if a.enabled)}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("id100://device/info")
def resource_device_info() -> str:
    """USB identification and connection state."""
    if _client is None or not _client.link.connected:
        return json.dumps({"connected": False})

    info = _client.link.device_info
    return json.dumps({
        "connected": True,
        "manufacturer": info.manufacturer,
        "product": info.product,
        "vendor_id": f"0x{info.vendor_id:04X}",
        "product_id": f"0x{info.product_id:04X}",
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def check_clock_accuracy() -> str:
    """Guide the AI through checking and correcting clock drift."""
    return """Read the device time with get_date_time and compare it to the current time.
Read get_last_calibration to see when the clock was last corrected.

If more than a few days have passed since the last calibration and the
device is off by more than a second, run the calibrate tool.
Report the measured drift in ppm and whether it hit the +/-189 ppm limit."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
