"""
FiscalPicker - Grid Builder Module.

This module builds the two grid views a picker renders: a fixed 42-cell
day grid for one month and a 12-cell month grid for one year. Every cell
is annotated through FiscalCalculator on its own date.

Classes:
    CalendarGridBuilder: Builds the Monday-first 6x7 day grid.
    YearGridBuilder: Builds the January-December month grid.
"""

from datetime import date, timedelta
from typing import List, Optional, Sequence

from fiscal_picker.errors import MalformedDateError
from fiscal_picker.fiscal_logic import FiscalCalculator
from fiscal_picker.schema import (
    DAYS_PER_WEEK,
    GRID_CELLS,
    MONTHS_PER_YEAR,
    DateLike,
    DayCell,
    FiscalConfig,
    MonthCell,
    WeekRow,
    month_key,
    to_date,
)


class CalendarGridBuilder:
    """
    Builds the day grid for the month containing an anchor date.

    The grid always holds exactly 42 cells (6 weeks of 7 days, Monday
    first): trailing days of the previous month, every day of the
    anchor month, then leading days of the next month.

    Attributes:
        calculator: FiscalCalculator used to annotate cells.

    Example:
        >>> builder = CalendarGridBuilder(FiscalCalculator())
        >>> cells = builder.build_month_grid(date(2024, 2, 1), FiscalConfig(4))
        >>> len(cells)
        42
    """

    def __init__(self, calculator: FiscalCalculator):
        """
        Initialises the CalendarGridBuilder with a FiscalCalculator.

        Args:
            calculator: FiscalCalculator instance for fiscal annotations.
        """
        self._calculator = calculator

    def build_month_grid(
        self,
        anchor: DateLike,
        config: FiscalConfig,
        reference_date: Optional[date] = None
    ) -> List[DayCell]:
        """
        Builds the 42-cell day grid for the anchor's month.

        Args:
            anchor: Any date within the month to display.
            config: Fiscal configuration.
            reference_date: Date flagged as today. Defaults to today.

        Returns:
            List of 42 DayCell objects, Monday-first across 6 week rows.

        Raises:
            MalformedDateError: If the grid would extend past the
                supported date range (January of year 1, December of
                year 9999).
        """
        anchor = to_date(anchor)
        if reference_date is None:
            reference_date = date.today()
        reference_date = to_date(reference_date)

        first_day = anchor.replace(day=1)
        days_in_month = self._calculator.days_in_month(first_day.year, first_day.month)
        leading = first_day.weekday()

        try:
            dates = [first_day - timedelta(days=offset) for offset in range(leading, 0, -1)]
            dates.extend(first_day + timedelta(days=offset) for offset in range(days_in_month))
            after = dates[-1]
            dates.extend(
                after + timedelta(days=offset)
                for offset in range(1, GRID_CELLS - len(dates) + 1)
            )
        except OverflowError as exc:
            raise MalformedDateError(
                f"Day grid for {first_day:%Y-%m} extends past the supported date range"
            ) from exc

        return [
            DayCell(
                date=day,
                fiscal_week=self._calculator.fiscal_week(day, config),
                in_current_month=day.month == first_day.month,
                is_today=day == reference_date,
            )
            for day in dates
        ]

    def week_rows(self, cells: Sequence[DayCell]) -> List[WeekRow]:
        """
        Re-slices a day grid into rows of seven.

        Each row is labelled with the fiscal week of its first cell.

        Args:
            cells: Day grid as returned by build_month_grid.

        Returns:
            List of WeekRow objects, one per week.
        """
        rows = []
        for start in range(0, len(cells), DAYS_PER_WEEK):
            row_cells = tuple(cells[start:start + DAYS_PER_WEEK])
            rows.append(WeekRow(fiscal_week=row_cells[0].fiscal_week, cells=row_cells))
        return rows


class YearGridBuilder:
    """
    Builds the month grid for the year containing an anchor date.

    Months are always in calendar order (January to December),
    independent of the fiscal start month.

    Attributes:
        calculator: FiscalCalculator used to annotate cells.
    """

    def __init__(self, calculator: FiscalCalculator):
        """
        Initialises the YearGridBuilder with a FiscalCalculator.

        Args:
            calculator: FiscalCalculator instance for fiscal annotations.
        """
        self._calculator = calculator

    def build_year_grid(
        self,
        anchor: DateLike,
        config: FiscalConfig,
        reference_date: Optional[date] = None
    ) -> List[MonthCell]:
        """
        Builds the 12-cell month grid for the anchor's year.

        Args:
            anchor: Any date within the year to display.
            config: Fiscal configuration.
            reference_date: Date whose month is flagged as current.
                Defaults to today.

        Returns:
            List of 12 MonthCell objects, January first.
        """
        anchor = to_date(anchor)
        if reference_date is None:
            reference_date = date.today()
        reference_date = to_date(reference_date)

        cells = []
        for month in range(1, MONTHS_PER_YEAR + 1):
            first_day = date(anchor.year, month, 1)
            cells.append(MonthCell(
                year_month_key=month_key(anchor.year, month),
                date=first_day,
                fiscal_year=self._calculator.fiscal_year(first_day, config),
                is_current_month=(
                    reference_date.year == anchor.year
                    and reference_date.month == month
                ),
            ))
        return cells
