"""
FiscalPicker - Fiscal Logic Module.

This module maps calendar dates to fiscal years and fiscal weeks under
a configurable fiscal start month, including leap year and month-length
helpers used by the grid builders.

Classes:
    FiscalCalculator: Pure fiscal calendar calculations.
"""

import calendar
from datetime import MAXYEAR, MINYEAR, date

from fiscal_picker.errors import MalformedDateError
from fiscal_picker.schema import DAYS_PER_WEEK, DateLike, FiscalConfig, to_date


class FiscalCalculator:
    """
    Pure fiscal calendar calculations.

    Holds no state: every result is derived from the date and the
    FiscalConfig passed in, so a changed start month is picked up on
    the next call.

    Example:
        >>> fc = FiscalCalculator()
        >>> cfg = FiscalConfig(start_month=4)
        >>> fc.fiscal_year(date(2024, 4, 1), cfg)
        2025
        >>> fc.fiscal_year_start(date(2024, 3, 15), cfg)
        datetime.date(2023, 4, 1)
    """

    def is_leap_year(self, year: int) -> bool:
        """
        Determines if the specified year is a leap year.

        Args:
            year: Four-digit year to check.

        Returns:
            True if the year is a leap year, False otherwise.
        """
        return calendar.isleap(year)

    def days_in_month(self, year: int, month: int) -> int:
        """
        Returns the total number of days in the specified month.

        Args:
            year: Four-digit year.
            month: Month number (1-12).

        Returns:
            Number of days in the specified month.

        Raises:
            MalformedDateError: If month is not in range 1-12.
        """
        if not 1 <= month <= 12:
            raise MalformedDateError(f"Month must be between 1 and 12, got {month}")
        return calendar.monthrange(year, month)[1]

    def fiscal_year(self, value: DateLike, config: FiscalConfig) -> int:
        """
        Returns the fiscal year containing the date.

        A fiscal year is named after the calendar year in which it ends:
        months before the start month belong to the fiscal year of the
        same calendar year, the start month onwards to the next one.
        With a January start the fiscal year is the calendar year.

        Args:
            value: Calendar date.
            config: Fiscal configuration.

        Returns:
            Fiscal year number.
        """
        value = to_date(value)
        if config.start_month == 1:
            return value.year
        if value.month < config.start_month:
            return value.year
        return value.year + 1

    def fiscal_year_start(self, value: DateLike, config: FiscalConfig) -> date:
        """
        Returns the first day of the fiscal year containing the date.

        Args:
            value: Calendar date.
            config: Fiscal configuration.

        Returns:
            Day 1 of the start month, in the same or previous calendar year.

        Raises:
            MalformedDateError: If the fiscal year starts before year 1.
        """
        value = to_date(value)
        year = value.year - 1 if value.month < config.start_month else value.year
        if year < MINYEAR:
            raise MalformedDateError(
                f"Fiscal year containing {value.isoformat()} starts before year {MINYEAR}"
            )
        return date(year, config.start_month, 1)

    def fiscal_year_end(self, value: DateLike, config: FiscalConfig) -> date:
        """
        Returns the last day of the fiscal year containing the date.

        Args:
            value: Calendar date.
            config: Fiscal configuration.

        Returns:
            Day before the start of the following fiscal year.

        Raises:
            MalformedDateError: If the fiscal year ends after year 9999.
        """
        start = self.fiscal_year_start(value, config)
        if start.month == 1:
            return date(start.year, 12, 31)

        end_year = start.year + 1
        if end_year > MAXYEAR:
            raise MalformedDateError(
                f"Fiscal year starting {start.isoformat()} ends after year {MAXYEAR}"
            )
        end_month = start.month - 1
        return date(end_year, end_month, self.days_in_month(end_year, end_month))

    def fiscal_month(self, value: DateLike, config: FiscalConfig) -> int:
        """
        Returns the 1-based position of the date's month in its fiscal year.

        Example:
            >>> FiscalCalculator().fiscal_month(date(2024, 4, 9), FiscalConfig(4))
            1
        """
        value = to_date(value)
        return (value.month - config.start_month) % 12 + 1

    def fiscal_week(self, value: DateLike, config: FiscalConfig) -> int:
        """
        Returns the 1-based fiscal week of the date.

        Counts whole calendar days from the fiscal year start, adds the
        start's weekday index (Sunday = 0, Saturday = 6) and divides by
        seven, rounding up. Weeks therefore change on Mondays. Week 1 is
        short unless the fiscal year starts on a Monday. A fiscal year
        starting on a Sunday would put that Sunday in week 0; it is
        counted as week 1 instead, sharing the week with the following
        Monday to Sunday.

        Date subtraction counts calendar days, so the result does not
        depend on daylight-saving transitions.

        Args:
            value: Calendar date.
            config: Fiscal configuration.

        Returns:
            Fiscal week number, at least 1.
        """
        value = to_date(value)
        start = self.fiscal_year_start(value, config)
        elapsed_days = (value - start).days
        offset = elapsed_days + start.isoweekday() % DAYS_PER_WEEK
        return max(1, -(-offset // DAYS_PER_WEEK))
