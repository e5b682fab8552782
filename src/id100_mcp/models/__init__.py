"""Fixed-size records exchanged with the device."""

from .appointments import Appointment, Appointments
from .calibration import LastCalibration
from .clock import DateTime, Standby, Version
from .flash import FlashClockConfig, FlashConfigPage
from .matrix import MatrixBitmap
