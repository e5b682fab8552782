"""File format handlers for appointment tables.

.json: ``{"appointments": [{"flags", "month", "day", "hour", "minute"}, ...]}``
"""

from __future__ import annotations

import json
from pathlib import Path

from .appointments import Appointments


def export_appointments(table: Appointments, path: str | Path) -> Path:
    """Write an appointment table to a JSON file.

    Returns:
        The path written to.
    """
    path = Path(path)
    path.write_text(json.dumps({"appointments": table.to_list()}, indent=2))
    return path


def import_appointments(path: str | Path) -> Appointments:
    """Read an appointment table from a JSON file.

    Raises:
        ValueError: If the file is not an appointment file or holds
            invalid entries.
    """
    path = Path(path)
    document = json.loads(path.read_text())
    if not isinstance(document, dict) or not isinstance(document.get("appointments"), list):
        raise ValueError(f"{path} is not an appointment file")
    try:
        table = Appointments.from_list(document["appointments"])
    except TypeError as e:
        raise ValueError(f"Invalid appointment entry in {path}: {e}") from e
    # Validate every field before anything is sent to the device
    table.to_bytes()
    return table
