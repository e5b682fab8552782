"""Physical links to the device."""

from .base import Link
