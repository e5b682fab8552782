"""Protocol layer: command codes, byte order, link framing and the transceiver."""

from .commands import Command
from .framing import Frame, build_reports, parse_reports
from .transceiver import Transceiver
