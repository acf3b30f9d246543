"""
FiscalPicker - Data Schema Module.

This module defines the core data models for the fiscal picker.
Every calendar value is a ``datetime.date``; anything carrying a time
component is truncated to its wall-clock date before use.

Fiscal Calendar Context:
    - A fiscal year starts on the first day of a configurable month (1-12)
    - Fiscal years are named after the calendar year in which they end
    - Fiscal weeks run Monday to Sunday, week 1 may be a short week

Classes:
    DisplayMode: Enumeration of picker modes.
    FiscalConfig: Immutable fiscal-year configuration.
    DayCell: One entry of the 42-cell day grid.
    MonthCell: One entry of the 12-cell month grid.
    WeekRow: One 7-cell row of the day grid with its fiscal week label.
    CalendarSnapshot: Rendered view with metadata for export purposes.
"""

import re
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime
from enum import Enum
from typing import List, Tuple, Union

from fiscal_picker.errors import InvalidConfigError, MalformedDateError


# Calendar-year fiscal convention
DEFAULT_START_MONTH = 1

# Day grid geometry (6 full weeks)
DAYS_PER_WEEK = 7
WEEK_ROWS = 6
GRID_CELLS = DAYS_PER_WEEK * WEEK_ROWS

MONTHS_PER_YEAR = 12

MONTH_KEY_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{1,2})$")

DateLike = Union[date, datetime]
DateKey = Tuple[int, int, int]


class DisplayMode(Enum):
    """
    Picker display mode.

    Attributes:
        DATE: Day grid for one month; selections are calendar days.
        YEAR_MONTH: Month grid for one year; selections are year-months.
    """

    DATE = "date"
    YEAR_MONTH = "yearMonth"


@dataclass(frozen=True)
class FiscalConfig:
    """
    Fiscal-year configuration for one picker session.

    Attributes:
        start_month: Calendar month (1-12) on which the fiscal year starts.

    Raises:
        InvalidConfigError: If start_month is not an integer in 1-12.
    """

    start_month: int = DEFAULT_START_MONTH

    def __post_init__(self) -> None:
        if isinstance(self.start_month, bool) or not isinstance(self.start_month, int):
            raise InvalidConfigError(
                f"Fiscal start month must be an integer, got {self.start_month!r}"
            )
        if not 1 <= self.start_month <= MONTHS_PER_YEAR:
            raise InvalidConfigError(
                f"Fiscal start month must be between 1 and 12, got {self.start_month}"
            )


@dataclass(frozen=True)
class DayCell:
    """
    One entry of the day grid.

    Attributes:
        date: Calendar date of the cell.
        fiscal_week: 1-based fiscal week of ``date``.
        in_current_month: False for leading/trailing days of adjacent months.
        is_today: True if ``date`` is the reference "today".
    """

    date: date
    fiscal_week: int
    in_current_month: bool
    is_today: bool = False

    @property
    def key(self) -> DateKey:
        """Returns the normalized selection key of the cell."""
        return date_key(self.date)


@dataclass(frozen=True)
class MonthCell:
    """
    One entry of the month grid.

    Attributes:
        year_month_key: Unique "YYYY-MM" key of the month.
        date: First day of the month.
        fiscal_year: Fiscal year the month belongs to.
        is_current_month: True if the month contains the reference "today".
    """

    year_month_key: str
    date: date
    fiscal_year: int
    is_current_month: bool = False


@dataclass(frozen=True)
class WeekRow:
    """
    One row of the day grid.

    Attributes:
        fiscal_week: Fiscal week of the row's first (Monday) cell.
        cells: The seven cells of the row, Monday first.
    """

    fiscal_week: int
    cells: Tuple[DayCell, ...]


@dataclass
class CalendarSnapshot:
    """
    Complete rendered view with metadata for export purposes.

    Captures the configuration, the anchor, both grids and both
    selection sets of a picker session at one point in time.

    Attributes:
        timestamp: When the snapshot was taken.
        version: FiscalPicker version identifier.
        start_month: Fiscal start month in effect.
        mode: Display mode in effect.
        anchor: First day of the anchored month.
        label: Display label of the anchor ("March 2024" or "2024").
        day_cells: The 42-cell day grid of the anchor month.
        month_cells: The 12-cell month grid of the anchor year.
        selected_dates: Selected calendar days, ascending.
        selected_months: Selected "YYYY-MM" keys, ascending.
    """

    timestamp: datetime
    version: str
    start_month: int
    mode: DisplayMode
    anchor: date
    label: str
    day_cells: List[DayCell] = field(default_factory=list)
    month_cells: List[MonthCell] = field(default_factory=list)
    selected_dates: List[date] = field(default_factory=list)
    selected_months: List[str] = field(default_factory=list)


def to_date(value: DateLike) -> date:
    """
    Truncates a date or datetime to its calendar date.

    Args:
        value: Date or datetime.

    Returns:
        Plain ``date`` with the same year, month and day.

    Raises:
        MalformedDateError: If value is not a date or datetime.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise MalformedDateError(f"Expected a date, got {value!r}")


def date_key(value: DateLike) -> DateKey:
    """
    Returns the (year, month, day) identity of a date.

    Example:
        >>> date_key(datetime(2024, 3, 15, 23, 59))
        (2024, 3, 15)
    """
    value = to_date(value)
    return (value.year, value.month, value.day)


def month_key(year: int, month: int) -> str:
    """
    Returns the "YYYY-MM" key of a calendar month.

    Raises:
        MalformedDateError: If month is not in 1-12 or year is out of range.

    Example:
        >>> month_key(2024, 3)
        '2024-03'
    """
    if not 1 <= month <= MONTHS_PER_YEAR:
        raise MalformedDateError(f"Month must be between 1 and 12, got {month}")
    if not MINYEAR <= year <= MAXYEAR:
        raise MalformedDateError(f"Year must be between {MINYEAR} and {MAXYEAR}, got {year}")
    return f"{year:04d}-{month:02d}"


def parse_month_key(key: str) -> Tuple[int, int]:
    """
    Parses a "YYYY-MM" key back into (year, month).

    Raises:
        MalformedDateError: If the key is not a valid year-month.
    """
    match = MONTH_KEY_PATTERN.match(key.strip())
    if not match:
        raise MalformedDateError(f"Month key must look like YYYY-MM, got {key!r}")
    year, month = int(match.group(1)), int(match.group(2))
    month_key(year, month)
    return year, month
