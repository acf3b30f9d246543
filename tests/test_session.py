"""
FiscalPicker - Picker Session Tests.

Property-based and unit tests for SelectionStore, NavigationController
and PickerSession. Tests ensure selections match by calendar identity,
navigation rolls years over correctly, and the two selection sets stay
independent across mode switches.
"""

from datetime import date, datetime

import pytest
from hypothesis import given, settings
from hypothesis.strategies import dates, integers, lists

from fiscal_picker.errors import InvalidConfigError, MalformedDateError
from fiscal_picker.schema import DayCell, DisplayMode, FiscalConfig, MonthCell
from fiscal_picker.session import NavigationController, PickerSession, SelectionStore


class TestSelectionStoreUnit:
    """Unit tests for SelectionStore."""

    def setup_method(self) -> None:
        """Initialise one store per mode for each test."""
        self.dates = SelectionStore(DisplayMode.DATE)
        self.months = SelectionStore(DisplayMode.YEAR_MONTH)

    def test_toggle_adds_then_removes(self) -> None:
        """Verify toggle adds an absent key and removes a present one."""
        assert self.dates.toggle(date(2024, 3, 15)) is True
        assert self.dates.is_selected(date(2024, 3, 15))
        assert self.dates.toggle(date(2024, 3, 15)) is False
        assert not self.dates.is_selected(date(2024, 3, 15))

    def test_same_day_different_objects_match(self) -> None:
        """Verify selection matches by calendar day, not object identity."""
        self.dates.toggle(datetime(2024, 3, 15, 9, 30))

        assert self.dates.is_selected(date(2024, 3, 15))
        assert self.dates.is_selected(datetime(2024, 3, 15, 18, 0))
        assert self.dates.is_selected((2024, 3, 15))
        assert self.dates.count() == 1

    def test_day_cell_key(self) -> None:
        """Verify a DayCell toggles its own date."""
        cell = DayCell(date=date(2024, 2, 29), fiscal_week=9, in_current_month=True)
        self.dates.toggle(cell)
        assert date(2024, 2, 29) in self.dates

    def test_toggle_twice_restores_count(self) -> None:
        """Verify toggling the same date twice leaves count() unchanged."""
        self.dates.toggle(date(2024, 1, 1))
        before = self.dates.count()

        self.dates.toggle(date(2024, 3, 15))
        self.dates.toggle(date(2024, 3, 15))

        assert self.dates.count() == before

    def test_clear(self) -> None:
        """Verify clear empties the store."""
        self.dates.toggle(date(2024, 1, 1))
        self.dates.toggle(date(2024, 1, 2))
        self.dates.clear()
        assert self.dates.count() == 0
        assert len(self.dates) == 0

    def test_month_keys_normalised(self) -> None:
        """Verify every month input resolves to the same YYYY-MM key."""
        self.months.toggle("2024-3")

        assert self.months.is_selected("2024-03")
        assert self.months.is_selected((2024, 3))
        assert self.months.is_selected(date(2024, 3, 31))
        assert self.months.members() == ["2024-03"]

    def test_month_cell_key(self) -> None:
        """Verify a MonthCell toggles its key."""
        cell = MonthCell(year_month_key="2024-07", date=date(2024, 7, 1), fiscal_year=2025)
        self.months.toggle(cell)
        assert self.months.is_selected("2024-07")

    def test_members_sorted(self) -> None:
        """Verify members are returned in ascending order."""
        self.dates.toggle(date(2024, 3, 15))
        self.dates.toggle(date(2023, 12, 1))
        assert self.dates.members() == [(2023, 12, 1), (2024, 3, 15)]

    @pytest.mark.parametrize(
        "key", [(2024, 2, 30), (2024, 13, 1), "2024-02-01", 42, (True, 3, 15), (2024, True, 1)]
    )
    def test_malformed_date_key_rejected(self, key) -> None:
        """Verify keys that are not calendar days are reported."""
        with pytest.raises(MalformedDateError):
            self.dates.toggle(key)
        assert self.dates.count() == 0

    @pytest.mark.parametrize(
        "key", [
            "2024-13", "March 2024", (2024, 0), ("2024", "3"), (True, 3), (2024, True),
            (10000, 1), "\uff12\uff10\uff12\uff14-03",
        ]
    )
    def test_malformed_month_key_rejected(self, key) -> None:
        """Verify keys that are not calendar months are reported."""
        with pytest.raises(MalformedDateError):
            self.months.toggle(key)
        assert self.months.count() == 0


class TestNavigationControllerUnit:
    """Unit tests for NavigationController."""

    def test_anchor_is_first_of_month(self) -> None:
        """Verify the anchor is normalised to day 1."""
        nav = NavigationController(datetime(2024, 3, 15, 12, 0))
        assert nav.anchor == date(2024, 3, 1)

    def test_default_anchor_is_current_month(self) -> None:
        """Verify the default anchor is the current month."""
        nav = NavigationController()
        assert nav.anchor == date.today().replace(day=1)

    def test_month_forward_rolls_year(self) -> None:
        """Verify December + 1 month is January of the next year."""
        nav = NavigationController(date(2024, 12, 1))
        assert nav.advance_month(1) == date(2025, 1, 1)

    def test_month_back_rolls_year(self) -> None:
        """Verify January - 1 month is December of the previous year."""
        nav = NavigationController(date(2024, 1, 1))
        assert nav.advance_month(-1) == date(2023, 12, 1)

    def test_multi_month_step(self) -> None:
        """Verify steps larger than a year roll over correctly."""
        nav = NavigationController(date(2024, 1, 1))
        assert nav.advance_month(13) == date(2025, 2, 1)
        assert nav.advance_month(-26) == date(2022, 12, 1)

    def test_year_step_keeps_month(self) -> None:
        """Verify a year step keeps the month."""
        nav = NavigationController(date(2024, 3, 1))
        assert nav.advance_year(-1) == date(2023, 3, 1)
        assert nav.advance_year(2) == date(2025, 3, 1)

    def test_go_to(self) -> None:
        """Verify go_to anchors to the month of the given date."""
        nav = NavigationController(date(2024, 3, 1))
        assert nav.go_to(date(1999, 7, 20)) == date(1999, 7, 1)

    def test_date_range_limits(self) -> None:
        """Verify steps past years 1-9999 raise and keep the anchor."""
        nav = NavigationController(date(9999, 12, 1))
        with pytest.raises(MalformedDateError):
            nav.advance_month(1)
        assert nav.anchor == date(9999, 12, 1)

        nav = NavigationController(date(1, 1, 1))
        with pytest.raises(MalformedDateError):
            nav.advance_year(-1)
        assert nav.anchor == date(1, 1, 1)


class TestPickerSessionUnit:
    """Unit tests for PickerSession."""

    def setup_method(self) -> None:
        """Initialise a session anchored on March 2024 with an April start."""
        self.session = PickerSession(FiscalConfig(4), anchor=date(2024, 3, 15))

    def test_defaults(self) -> None:
        """Verify default configuration and mode."""
        session = PickerSession()
        assert session.config.start_month == 1
        assert session.mode == DisplayMode.DATE

    def test_mode_from_string(self) -> None:
        """Verify modes can be given by value."""
        session = PickerSession(mode="yearMonth")
        assert session.mode == DisplayMode.YEAR_MONTH

    def test_invalid_mode_rejected(self) -> None:
        """Verify unknown modes raise InvalidConfigError."""
        with pytest.raises(InvalidConfigError):
            self.session.set_mode("week")

    def test_display_labels(self) -> None:
        """Verify labels for date and year-month modes."""
        assert self.session.display_label() == "March 2024"
        self.session.set_mode(DisplayMode.YEAR_MONTH)
        assert self.session.display_label() == "2024"

    def test_step_follows_mode(self) -> None:
        """Verify step moves months in date mode and years in month mode."""
        assert self.session.step(1) == date(2024, 4, 1)
        self.session.set_mode(DisplayMode.YEAR_MONTH)
        assert self.session.step(-1) == date(2023, 4, 1)

    def test_selections_independent_across_modes(self) -> None:
        """Verify switching modes keeps both selection sets."""
        self.session.toggle(date(2024, 3, 15))
        self.session.set_mode(DisplayMode.YEAR_MONTH)
        self.session.toggle("2024-05")

        assert self.session.count() == 1
        assert self.session.selected_dates() == [date(2024, 3, 15)]
        assert self.session.selected_months() == ["2024-05"]

        self.session.set_mode(DisplayMode.DATE)
        assert self.session.is_selected(date(2024, 3, 15))

    def test_clear_only_active_mode(self) -> None:
        """Verify clear empties only the active selection set."""
        self.session.toggle(date(2024, 3, 15))
        self.session.set_mode(DisplayMode.YEAR_MONTH)
        self.session.toggle("2024-05")

        self.session.clear()

        assert self.session.count() == 0
        assert self.session.date_selection.count() == 1

    def test_selection_summary(self) -> None:
        """Verify singular and plural selection summaries."""
        assert self.session.selection_summary() == "0 dates selected"
        self.session.toggle(date(2024, 3, 15))
        assert self.session.selection_summary() == "1 date selected"
        self.session.toggle(date(2024, 3, 16))
        assert self.session.selection_summary() == "2 dates selected"

        self.session.set_mode(DisplayMode.YEAR_MONTH)
        self.session.toggle("2024-05")
        assert self.session.selection_summary() == "1 month selected"

    def test_start_month_change_rebuilds_grids(self) -> None:
        """Verify grids reflect a changed start month immediately."""
        before = [c.fiscal_year for c in self.session.year_grid()]
        self.session.set_start_month(1)
        after = [c.fiscal_year for c in self.session.year_grid()]

        assert before == [2024] * 3 + [2025] * 9
        assert after == [2024] * 12

    def test_invalid_start_month_keeps_config(self) -> None:
        """Verify a rejected start month leaves the old config in effect."""
        with pytest.raises(InvalidConfigError):
            self.session.set_start_month(13)
        assert self.session.config.start_month == 4

    def test_grids_follow_anchor(self) -> None:
        """Verify grids are built for the anchored month and year."""
        reference = date(2024, 3, 20)
        cells = self.session.day_grid(reference)
        assert sum(1 for c in cells if c.in_current_month) == 31
        assert all(
            c.date.month == 3 for c in cells if c.in_current_month
        )
        assert len(self.session.week_rows(reference)) == 6

        self.session.step(12)
        assert self.session.year_grid(reference)[0].year_month_key == "2025-01"

    def test_snapshot(self) -> None:
        """Verify the snapshot captures view and both selection sets."""
        self.session.toggle(date(2024, 3, 15))
        self.session.month_selection.toggle("2024-05")
        stamp = datetime(2024, 3, 20, 9, 0)

        snapshot = self.session.snapshot(date(2024, 3, 20), timestamp=stamp)

        assert snapshot.timestamp == stamp
        assert snapshot.start_month == 4
        assert snapshot.mode == DisplayMode.DATE
        assert snapshot.anchor == date(2024, 3, 1)
        assert snapshot.label == "March 2024"
        assert len(snapshot.day_cells) == 42
        assert len(snapshot.month_cells) == 12
        assert snapshot.selected_dates == [date(2024, 3, 15)]
        assert snapshot.selected_months == ["2024-05"]


class TestSessionProperty:
    """Property-based tests for selection and navigation."""

    @given(
        lists(dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31)), max_size=20),
        dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31))
    )
    @settings(max_examples=200)
    def test_toggle_pair_restores_membership(self, existing, key) -> None:
        """
        Property: toggle(k); toggle(k) restores membership and count.
        """
        store = SelectionStore(DisplayMode.DATE)
        for day in existing:
            if not store.is_selected(day):
                store.toggle(day)

        was_selected = store.is_selected(key)
        count = store.count()

        store.toggle(key)
        store.toggle(key)

        assert store.is_selected(key) == was_selected
        assert store.count() == count

    @given(
        dates(min_value=date(1900, 1, 1), max_value=date(2100, 12, 31)),
        integers(min_value=-240, max_value=240)
    )
    @settings(max_examples=200)
    def test_month_steps_are_reversible(self, start: date, delta: int) -> None:
        """
        Property: Moving forward and back by the same number of months
        returns to the original anchor.
        """
        nav = NavigationController(start)
        nav.advance_month(delta)
        nav.advance_month(-delta)
        assert nav.anchor == start.replace(day=1)
