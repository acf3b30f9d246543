"""
FiscalPicker - Snapshot Serialisation Module.

This module provides JSON serialisation of rendered picker views so
other systems can consume the fiscal annotations and the chosen dates.
Dates are written in ISO 8601 form.

Every snapshot includes a timestamp and the FiscalPicker version.
Snapshots are an export format; they are never loaded back into a
picker session.

Classes:
    CalendarEncoder: JSON encoder for dates and display modes.
    AuditLogger: Manages JSON serialisation of calendar snapshots.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Union

from fiscal_picker import __version__
from fiscal_picker.schema import (
    CalendarSnapshot,
    DayCell,
    DisplayMode,
    MonthCell,
)


class CalendarEncoder(json.JSONEncoder):
    """
    Custom JSON encoder for calendar values.

    Encodes dates and datetimes as ISO 8601 strings and display
    modes by their value.
    """

    def default(self, obj: Any) -> Any:
        """
        Encode date, datetime and DisplayMode objects.

        Args:
            obj: Object to encode.

        Returns:
            JSON-serialisable representation.
        """
        if isinstance(obj, (date, datetime)):
            return obj.isoformat()
        if isinstance(obj, DisplayMode):
            return obj.value
        return super().default(obj)


class AuditLogger:
    """
    Manages JSON serialisation of calendar snapshots.

    Example:
        >>> logger = AuditLogger()
        >>> json_str = logger.serialise_snapshot(snapshot)
        >>> logger.save_to_file(snapshot, "output/fiscal_calendar.json")
    """

    def __init__(self, version: str = None):
        """
        Initialises the AuditLogger.

        Args:
            version: Generator version recorded in the metadata.
                     Defaults to package version.
        """
        self._version = version or __version__

    def serialise_snapshot(self, snapshot: CalendarSnapshot) -> str:
        """
        Serialises a CalendarSnapshot to JSON string.

        Args:
            snapshot: Calendar snapshot to serialise.

        Returns:
            JSON string representation.
        """
        data = self._snapshot_to_dict(snapshot)
        return json.dumps(data, cls=CalendarEncoder, indent=2)

    def save_to_file(
        self,
        snapshot: CalendarSnapshot,
        file_path: Union[str, Path]
    ) -> None:
        """
        Saves a CalendarSnapshot to a JSON file.

        Args:
            snapshot: Calendar snapshot to save.
            file_path: Output file path.

        Raises:
            PermissionError: If file cannot be written.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        json_str = self.serialise_snapshot(snapshot)
        file_path.write_text(json_str, encoding="utf-8")

    def _snapshot_to_dict(self, snapshot: CalendarSnapshot) -> Dict[str, Any]:
        """
        Converts CalendarSnapshot to dictionary for JSON serialisation.

        Args:
            snapshot: Snapshot to convert.

        Returns:
            Dictionary representation.
        """
        return {
            "metadata": {
                "timestamp": snapshot.timestamp.isoformat(),
                "version": snapshot.version,
                "generated_by": f"FiscalPicker {self._version}",
            },
            "view": {
                "start_month": snapshot.start_month,
                "mode": snapshot.mode.value,
                "anchor": snapshot.anchor.isoformat(),
                "label": snapshot.label,
            },
            "day_grid": [self._day_cell_to_dict(cell) for cell in snapshot.day_cells],
            "month_grid": [self._month_cell_to_dict(cell) for cell in snapshot.month_cells],
            "selections": {
                "dates": [day.isoformat() for day in snapshot.selected_dates],
                "months": list(snapshot.selected_months),
            },
        }

    def _day_cell_to_dict(self, cell: DayCell) -> Dict[str, Any]:
        return {
            "date": cell.date.isoformat(),
            "fiscal_week": cell.fiscal_week,
            "in_current_month": cell.in_current_month,
            "is_today": cell.is_today,
        }

    def _month_cell_to_dict(self, cell: MonthCell) -> Dict[str, Any]:
        return {
            "key": cell.year_month_key,
            "date": cell.date.isoformat(),
            "fiscal_year": cell.fiscal_year,
            "is_current_month": cell.is_current_month,
        }

    def generate_filename(self, prefix: str = "fiscal_calendar") -> str:
        """
        Generates a timestamped filename for snapshot files.

        Args:
            prefix: Filename prefix. Defaults to "fiscal_calendar".

        Returns:
            Filename like "fiscal_calendar_2024-12-18_143052.json".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.json"
