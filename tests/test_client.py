"""Tests for the per-operation client methods."""

import struct
from unittest.mock import MagicMock

import pytest

from id100_mcp.client import PPM_LIMIT, ID100Client, clamp_ppm
from id100_mcp.errors import ProtocolMismatchError
from id100_mcp.models.appointments import Appointment, Appointments
from id100_mcp.models.calibration import LastCalibration
from id100_mcp.models.clock import DateTime, Standby
from id100_mcp.models.flash import PAGE_DATA_SIZE, FlashClockConfig, FlashConfigPage
from id100_mcp.models.matrix import MatrixBitmap


def _client(command: str, payload: bytes = b"") -> tuple[ID100Client, MagicMock]:
    link = MagicMock()
    link.receive_command_and_buffer.return_value = (ord(command), payload)
    return ID100Client(link), link


def _sent(link: MagicMock) -> tuple[int, bytes]:
    return link.send_command_and_buffer.call_args.args


def test_get_version():
    """Version fields are decoded big-endian."""
    client, link = _client("v", bytes([0x00, 0x01, 0x00, 0x02, 0x00, 0x03]))
    version = client.get_version()

    assert _sent(link) == (ord("v"), b"")
    assert (version.major, version.minor, version.revision) == (1, 2, 3)
    assert str(version) == "1.2.3"


def test_get_date_time():
    """The date/time record is returned as sent by the device."""
    client, link = _client("t", bytes([26, 10, 18, 7, 14, 30, 5]))
    date_time = client.get_date_time()

    assert _sent(link) == (ord("t"), b"")
    assert str(date_time) == "2026-10-18 14:30:05"
    assert date_time.weekday == 7


def test_set_date_time():
    """The date/time record is sent as the request payload."""
    client, link = _client("T")
    client.set_date_time(DateTime(year=2026, month=10, day=18, weekday=7, hour=14, minute=30))
    assert _sent(link) == (ord("T"), bytes([26, 10, 18, 7, 14, 30, 0]))


@pytest.mark.parametrize("method, command", [
    ("set_normal_mode", "A"),
    ("set_preview_mode", "a"),
    ("factory_reset", "X"),
    ("activate_bootloader", "!"),
])
def test_commands_without_payload(method, command):
    """Mode and maintenance commands carry no payload either way."""
    client, link = _client(command)
    assert getattr(client, method)() is None
    assert _sent(link) == (ord(command), b"")
    link.receive_command_and_buffer.assert_called_once_with(0)


def test_set_preview_matrix():
    """The bitmap is sent as 10 big-endian row words."""
    client, link = _client("D")
    matrix = MatrixBitmap()
    matrix.set_pixel(0, 0)
    client.set_preview_matrix(matrix)

    command, payload = _sent(link)
    assert command == ord("D")
    assert len(payload) == MatrixBitmap.SIZE
    assert payload[:2] == b"\x80\x00"


def test_get_intensity():
    client, link = _client("b", b"\x42")
    assert client.get_intensity() == 0x42
    link.receive_command_and_buffer.assert_called_once_with(1)


def test_set_intensity():
    client, link = _client("B")
    client.set_intensity(200)
    assert _sent(link) == (ord("B"), bytes([200]))


def test_set_intensity_bounds():
    """Out-of-range intensity is rejected before anything is sent."""
    client, link = _client("B")
    with pytest.raises(ValueError):
        client.set_intensity(256)
    link.send_command_and_buffer.assert_not_called()


def test_get_last_calibration():
    client, _ = _client("c", bytes([26, 1, 2, 5, 3, 4, 5]) + struct.pack("<f", -12.5))
    last = client.get_last_calibration()
    assert isinstance(last, LastCalibration)
    assert str(last.date_time) == "2026-01-02 03:04:05"
    assert last.ppm == -12.5


@pytest.mark.parametrize("requested, sent", [
    (250.0, 189.0),
    (189.5, 189.0),
    (-1000.0, -189.0),
    (-189.0, -189.0),
    (12.5, 12.5),
    (0.0, 0.0),
])
def test_set_rtc_calibration_clamps(requested, sent):
    """Values beyond the limit are saturated, values inside are unchanged."""
    client, link = _client("C")
    assert client.set_rtc_calibration(requested) == sent

    command, payload = _sent(link)
    assert command == ord("C")
    assert struct.unpack("<f", payload)[0] == sent


def test_clamp_ppm_rejects_nan():
    with pytest.raises(ValueError):
        clamp_ppm(float("nan"))
    assert clamp_ppm(float("inf")) == PPM_LIMIT


def test_standby_roundtrip():
    """Standby is read and written as the same 5-byte record."""
    client, link = _client("s", bytes([0x1F, 23, 0, 6, 30]))
    standby = client.get_standby()
    assert standby.weekdays == ["mon", "tue", "wed", "thu", "fri"]
    assert standby.to_dict()["off"] == "23:00"

    client, link = _client("S")
    client.set_standby(standby)
    assert _sent(link) == (ord("S"), bytes([0x1F, 23, 0, 6, 30]))


def test_get_flash_config_page():
    """The requested page goes out big-endian and the echo is verified."""
    data = bytes(range(PAGE_DATA_SIZE))
    client, link = _client("f", b"\x01\x02" + data)
    page = client.get_flash_config_page(0x0102)

    assert _sent(link) == (ord("f"), b"\x01\x02")
    link.receive_command_and_buffer.assert_called_once_with(FlashConfigPage.SIZE)
    assert page.page_number == 0x0102
    assert page.data == data


def test_get_flash_config_page_wrong_echo():
    """A reply for another page is rejected."""
    client, _ = _client("f", b"\x02\x01" + bytes(PAGE_DATA_SIZE))
    with pytest.raises(ProtocolMismatchError) as exc_info:
        client.get_flash_config_page(0x0102)
    assert exc_info.value.kind == "page"
    assert exc_info.value.value == 0x0201


def test_erase_flash_config_sector():
    client, link = _client("E", b"\x00\x05")
    client.erase_flash_config_sector(5)
    assert _sent(link) == (ord("E"), b"\x00\x05")
    link.receive_command_and_buffer.assert_called_once_with(2)


def test_erase_flash_config_sector_wrong_echo():
    """Erasing page 5 while the device reports page 7 fails with 7."""
    client, _ = _client("E", b"\x00\x07")
    with pytest.raises(ProtocolMismatchError) as exc_info:
        client.erase_flash_config_sector(5)
    assert exc_info.value.value == 7
    assert "Bad page number received: 7" in str(exc_info.value)


def test_page_number_bounds():
    """Page numbers outside 16 bits are rejected before sending."""
    client, link = _client("E", b"\x00\x00")
    with pytest.raises(ValueError):
        client.erase_flash_config_sector(70000)
    link.send_command_and_buffer.assert_not_called()


def test_set_flash_clock_config():
    """The embedded page number is checked against the echo."""
    config = FlashClockConfig(page_number=9, data=b"\x11" * PAGE_DATA_SIZE)
    client, link = _client("F", b"\x00\x09")
    client.set_flash_clock_config(config)

    command, payload = _sent(link)
    assert command == ord("F")
    assert payload == b"\x00\x09" + b"\x11" * PAGE_DATA_SIZE
    assert config.page_number == 9


def test_set_flash_clock_config_wrong_echo():
    client, _ = _client("F", b"\x00\x08")
    with pytest.raises(ProtocolMismatchError):
        client.set_flash_clock_config(FlashClockConfig(page_number=9))


def test_get_appointments():
    table = Appointments.from_list([{"flags": 1, "month": 12, "day": 24, "hour": 18, "minute": 0}])
    client, link = _client("r", table.to_bytes())
    result = client.get_appointments()

    link.receive_command_and_buffer.assert_called_once_with(Appointments.SIZE)
    assert result.entries[0] == Appointment(flags=1, month=12, day=24, hour=18, minute=0)
    assert not result.entries[1].enabled


def test_set_appointments():
    table = Appointments()
    client, link = _client("R")
    client.set_appointments(table)
    assert _sent(link) == (ord("R"), bytes(Appointments.SIZE))


def test_reply_mismatch_stops_processing():
    """A wrong reply command aborts before the payload is decoded."""
    client, _ = _client("t", b"")
    with pytest.raises(ProtocolMismatchError) as exc_info:
        client.get_version()
    assert exc_info.value.kind == "command"


def test_connect_and_disconnect_delegate_to_link():
    client, link = _client("v")
    client.connect("path")
    client.disconnect()
    link.connect.assert_called_once_with("path")
    link.disconnect.assert_called_once_with()
