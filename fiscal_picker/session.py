"""
FiscalPicker - Picker Session Module.

This module holds the mutable state of one picker instance: the view
anchor, the display mode, the fiscal configuration and the two
independent selection sets (days and year-months).

Selections are keyed by normalized calendar identity, never by object
identity, so two date objects for the same day always match.

Classes:
    SelectionStore: Toggle-based selection set for one display mode.
    NavigationController: Moves the view anchor by months or years.
    PickerSession: Session-scoped owner of anchor, mode and selections.
"""

from datetime import MAXYEAR, MINYEAR, date, datetime
from typing import Hashable, List, Optional, Set, Union

from fiscal_picker import __version__
from fiscal_picker.errors import InvalidConfigError, MalformedDateError
from fiscal_picker.fiscal_logic import FiscalCalculator
from fiscal_picker.grids import CalendarGridBuilder, YearGridBuilder
from fiscal_picker.labels import LabelFormatter
from fiscal_picker.schema import (
    MONTHS_PER_YEAR,
    CalendarSnapshot,
    DateLike,
    DayCell,
    DisplayMode,
    FiscalConfig,
    MonthCell,
    WeekRow,
    date_key,
    month_key,
    parse_month_key,
    to_date,
)


def _all_ints(values: tuple) -> bool:
    # bool is an int subclass but never a valid year, month or day
    return all(isinstance(v, int) and not isinstance(v, bool) for v in values)


class SelectionStore:
    """
    Set of selected keys for one display mode.

    Date mode keys are (year, month, day) tuples; year-month mode keys
    are "YYYY-MM" strings. Any accepted input is normalized to that key
    before a set operation, so membership tests are O(1).

    Accepted inputs:
        DATE: date, datetime, DayCell or a (year, month, day) tuple.
        YEAR_MONTH: date, datetime, MonthCell, a (year, month) tuple
            or a "YYYY-MM" string.

    Example:
        >>> store = SelectionStore(DisplayMode.DATE)
        >>> store.toggle(datetime(2024, 3, 15, 9, 30))
        True
        >>> store.is_selected(date(2024, 3, 15))
        True
    """

    def __init__(self, mode: DisplayMode):
        """
        Initialises an empty SelectionStore.

        Args:
            mode: Display mode whose keys this store holds.
        """
        self._mode = mode
        self._keys: Set[Hashable] = set()

    @property
    def mode(self) -> DisplayMode:
        """Returns the display mode of the store."""
        return self._mode

    def normalise(self, key) -> Hashable:
        """
        Converts an accepted input into the store's canonical key.

        Args:
            key: Date-like value, cell, tuple or month key string.

        Returns:
            (year, month, day) tuple or "YYYY-MM" string.

        Raises:
            MalformedDateError: If the input does not resolve to a valid
                calendar day or month.
        """
        if self._mode == DisplayMode.DATE:
            return self._normalise_date(key)
        return self._normalise_month(key)

    def _normalise_date(self, key) -> Hashable:
        if isinstance(key, DayCell):
            return key.key
        if isinstance(key, (date, datetime)):
            return date_key(key)
        if isinstance(key, tuple) and len(key) == 3:
            if not _all_ints(key):
                raise MalformedDateError(f"Invalid calendar day: {key!r}")
            try:
                return date_key(date(*key))
            except (TypeError, ValueError) as exc:
                raise MalformedDateError(f"Invalid calendar day: {key!r}") from exc
        raise MalformedDateError(f"Cannot derive a date key from {key!r}")

    def _normalise_month(self, key) -> Hashable:
        if isinstance(key, MonthCell):
            return key.year_month_key
        if isinstance(key, (date, datetime)):
            return month_key(key.year, key.month)
        if isinstance(key, tuple) and len(key) == 2:
            if not _all_ints(key):
                raise MalformedDateError(f"Invalid year-month: {key!r}")
            return month_key(*key)
        if isinstance(key, str):
            return month_key(*parse_month_key(key))
        raise MalformedDateError(f"Cannot derive a month key from {key!r}")

    def toggle(self, key) -> bool:
        """
        Adds the key if absent, removes it if present.

        Args:
            key: Any accepted input for the store's mode.

        Returns:
            True if the key is selected after the toggle.
        """
        normalised = self.normalise(key)
        if normalised in self._keys:
            self._keys.remove(normalised)
            return False
        self._keys.add(normalised)
        return True

    def is_selected(self, key) -> bool:
        """Returns True if the key is currently selected."""
        return self.normalise(key) in self._keys

    def clear(self) -> None:
        """Removes every selected key."""
        self._keys.clear()

    def count(self) -> int:
        """Returns the number of selected keys."""
        return len(self._keys)

    def members(self) -> list:
        """Returns the selected keys in ascending order."""
        return sorted(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key) -> bool:
        return self.is_selected(key)


class NavigationController:
    """
    Moves the view anchor by whole months or years.

    The anchor is always the first day of a month. Navigation is
    unbounded apart from the range a ``date`` can hold (years 1-9999);
    a step past that range raises and leaves the anchor unchanged.

    Example:
        >>> nav = NavigationController(date(2024, 12, 15))
        >>> nav.advance_month(1)
        datetime.date(2025, 1, 1)
    """

    def __init__(self, anchor: Optional[DateLike] = None):
        """
        Initialises the NavigationController.

        Args:
            anchor: Any date within the month to show first.
                Defaults to today.
        """
        if anchor is None:
            anchor = date.today()
        self._anchor = to_date(anchor).replace(day=1)

    @property
    def anchor(self) -> date:
        """Returns the first day of the anchored month."""
        return self._anchor

    def advance_month(self, delta: int = 1) -> date:
        """
        Moves the anchor by ``delta`` months, rolling the year over.

        Args:
            delta: Number of months to move; negative moves back.

        Returns:
            The new anchor.

        Raises:
            MalformedDateError: If the new anchor is outside years 1-9999.
        """
        index = self._anchor.year * MONTHS_PER_YEAR + self._anchor.month - 1 + delta
        year, month_index = divmod(index, MONTHS_PER_YEAR)
        self._anchor = self._first_of_month(year, month_index + 1)
        return self._anchor

    def advance_year(self, delta: int = 1) -> date:
        """
        Moves the anchor by ``delta`` years, keeping the month.

        Args:
            delta: Number of years to move; negative moves back.

        Returns:
            The new anchor.

        Raises:
            MalformedDateError: If the new anchor is outside years 1-9999.
        """
        self._anchor = self._first_of_month(self._anchor.year + delta, self._anchor.month)
        return self._anchor

    def go_to(self, value: DateLike) -> date:
        """Anchors to the month containing ``value``."""
        self._anchor = to_date(value).replace(day=1)
        return self._anchor

    def go_to_today(self) -> date:
        """Anchors to the current month."""
        return self.go_to(date.today())

    def _first_of_month(self, year: int, month: int) -> date:
        if not MINYEAR <= year <= MAXYEAR:
            raise MalformedDateError(
                f"Cannot navigate to year {year}: outside {MINYEAR}-{MAXYEAR}"
            )
        return date(year, month, 1)


class PickerSession:
    """
    Session-scoped state of one fiscal picker.

    Owns the fiscal configuration, the display mode, the navigation
    anchor and two independent selection sets. Switching modes keeps
    both selection sets; clearing only affects the active mode. Grids
    are rebuilt on every call, so a changed start month is always
    reflected.

    Attributes:
        navigation: NavigationController holding the anchor.
        date_selection: SelectionStore for date mode.
        month_selection: SelectionStore for year-month mode.

    Example:
        >>> session = PickerSession(FiscalConfig(4), anchor=date(2024, 3, 1))
        >>> session.toggle(date(2024, 3, 15))
        True
        >>> session.selection_summary()
        '1 date selected'
    """

    def __init__(
        self,
        config: Optional[FiscalConfig] = None,
        mode: Union[DisplayMode, str] = DisplayMode.DATE,
        anchor: Optional[DateLike] = None,
        formatter: Optional[LabelFormatter] = None,
        calculator: Optional[FiscalCalculator] = None
    ):
        """
        Initialises the PickerSession.

        Args:
            config: Fiscal configuration. Defaults to a January start.
            mode: Initial display mode.
            anchor: Any date within the month to show first.
                Defaults to today.
            formatter: Label formatter. Defaults to LabelFormatter().
            calculator: Fiscal calculator shared by both grid builders.
        """
        self._config = config if config is not None else FiscalConfig()
        self._mode = self._coerce_mode(mode)
        self._formatter = formatter or LabelFormatter()
        self._calculator = calculator or FiscalCalculator()
        self._day_builder = CalendarGridBuilder(self._calculator)
        self._year_builder = YearGridBuilder(self._calculator)

        self.navigation = NavigationController(anchor)
        self.date_selection = SelectionStore(DisplayMode.DATE)
        self.month_selection = SelectionStore(DisplayMode.YEAR_MONTH)

    @property
    def config(self) -> FiscalConfig:
        """Returns the fiscal configuration in effect."""
        return self._config

    @property
    def mode(self) -> DisplayMode:
        """Returns the active display mode."""
        return self._mode

    @property
    def anchor(self) -> date:
        """Returns the first day of the anchored month."""
        return self.navigation.anchor

    @property
    def calculator(self) -> FiscalCalculator:
        """Returns the fiscal calculator used for annotations."""
        return self._calculator

    @property
    def formatter(self) -> LabelFormatter:
        """Returns the label formatter."""
        return self._formatter

    @property
    def selection(self) -> SelectionStore:
        """Returns the selection store of the active mode."""
        if self._mode == DisplayMode.DATE:
            return self.date_selection
        return self.month_selection

    def set_mode(self, mode: Union[DisplayMode, str]) -> None:
        """
        Switches the display mode. Both selection sets are kept.

        Raises:
            InvalidConfigError: If mode is not a known display mode.
        """
        self._mode = self._coerce_mode(mode)

    def set_start_month(self, start_month: int) -> None:
        """
        Replaces the fiscal configuration.

        Raises:
            InvalidConfigError: If start_month is not in 1-12. The
                previous configuration stays in effect.
        """
        self._config = FiscalConfig(start_month=start_month)

    def step(self, direction: int) -> date:
        """
        Moves the view by ``direction`` units of the active mode.

        Date mode moves by months, year-month mode by years.

        Returns:
            The new anchor.
        """
        if self._mode == DisplayMode.DATE:
            return self.navigation.advance_month(direction)
        return self.navigation.advance_year(direction)

    def toggle(self, key) -> bool:
        """Toggles a key in the active selection set."""
        return self.selection.toggle(key)

    def is_selected(self, key) -> bool:
        """Returns True if the key is selected in the active mode."""
        return self.selection.is_selected(key)

    def clear(self) -> None:
        """Clears the active selection set only."""
        self.selection.clear()

    def count(self) -> int:
        """Returns the size of the active selection set."""
        return self.selection.count()

    def day_grid(self, reference_date: Optional[date] = None) -> List[DayCell]:
        """Builds the 42-cell day grid of the anchored month."""
        return self._day_builder.build_month_grid(self.anchor, self._config, reference_date)

    def week_rows(self, reference_date: Optional[date] = None) -> List[WeekRow]:
        """Builds the day grid of the anchored month as six week rows."""
        return self._day_builder.week_rows(self.day_grid(reference_date))

    def year_grid(self, reference_date: Optional[date] = None) -> List[MonthCell]:
        """Builds the 12-cell month grid of the anchored year."""
        return self._year_builder.build_year_grid(self.anchor, self._config, reference_date)

    def display_label(self) -> str:
        """
        Returns the anchor label for the active mode.

        Example: "March 2024" in date mode, "2024" in year-month mode.
        """
        if self._mode == DisplayMode.DATE:
            return f"{self._formatter.month_name(self.anchor.month)} {self.anchor.year}"
        return str(self.anchor.year)

    def selection_summary(self) -> str:
        """
        Returns a count line for the active selection set.

        Example: "3 dates selected" or "1 month selected".
        """
        count = self.count()
        noun = "date" if self._mode == DisplayMode.DATE else "month"
        plural = "" if count == 1 else "s"
        return f"{count} {noun}{plural} selected"

    def selected_dates(self) -> List[date]:
        """Returns the selected days in ascending order."""
        return [date(*key) for key in self.date_selection.members()]

    def selected_months(self) -> List[str]:
        """Returns the selected "YYYY-MM" keys in ascending order."""
        return self.month_selection.members()

    def snapshot(
        self,
        reference_date: Optional[date] = None,
        timestamp: Optional[datetime] = None
    ) -> CalendarSnapshot:
        """
        Captures the current view and both selection sets.

        Args:
            reference_date: Date flagged as today in the grids.
            timestamp: Snapshot time. Defaults to now.

        Returns:
            CalendarSnapshot of the session.
        """
        return CalendarSnapshot(
            timestamp=timestamp or datetime.now(),
            version=__version__,
            start_month=self._config.start_month,
            mode=self._mode,
            anchor=self.anchor,
            label=self.display_label(),
            day_cells=self.day_grid(reference_date),
            month_cells=self.year_grid(reference_date),
            selected_dates=self.selected_dates(),
            selected_months=self.selected_months(),
        )

    @staticmethod
    def _coerce_mode(mode: Union[DisplayMode, str]) -> DisplayMode:
        if isinstance(mode, DisplayMode):
            return mode
        try:
            return DisplayMode(mode)
        except ValueError as exc:
            raise InvalidConfigError(
                f"Display mode must be 'date' or 'yearMonth', got {mode!r}"
            ) from exc
