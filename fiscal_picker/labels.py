"""
FiscalPicker - Label Formatting Module.

The picker core only deals in month and weekday indexes; turning them
into display strings is delegated to a formatter. The default formatter
reads the names the ``calendar`` module exposes for the active locale.

Classes:
    LabelFormatter: Default month and weekday name provider.
"""

import calendar


class LabelFormatter:
    """
    Provides display names for month and weekday indexes.

    Months are 1-based (January = 1). Weekdays are 0-based and
    Monday-first (Monday = 0), matching the day grid columns.
    Replace with a subclass to plug in another localisation service.
    """

    def month_name(self, month: int) -> str:
        """Returns the full name of the month, e.g. "March"."""
        return calendar.month_name[month]

    def month_abbr(self, month: int) -> str:
        """Returns the abbreviated name of the month, e.g. "Mar"."""
        return calendar.month_abbr[month]

    def weekday_abbr(self, weekday: int) -> str:
        """Returns the abbreviated name of the weekday, e.g. "Mon"."""
        return calendar.day_abbr[weekday]

    def weekday_headers(self) -> list:
        """Returns the seven weekday abbreviations, Monday first."""
        return [self.weekday_abbr(index) for index in range(7)]
