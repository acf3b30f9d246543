"""
FiscalPicker - Input Validation Module.

This module parses the textual inputs of the command line (fiscal start
month, display mode, anchor month and selections) into typed values,
collecting every problem with its field name and position instead of
stopping at the first one.

Accepted Formats:
    - Start month: "4", "04", "April", "apr"
    - Anchor: "2024-03" or "2024-03-15"
    - Selections: "2024-03-15" in date mode, "2024-03" in year-month mode

Classes:
    ValidationError: A single input problem with context.
    ValidationResult: Container for parsed values and errors.
    InputValidator: Parses and validates picker inputs.
"""

import calendar
import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple, Union

from fiscal_picker.errors import InvalidConfigError, MalformedDateError
from fiscal_picker.schema import (
    DEFAULT_START_MONTH,
    DisplayMode,
    FiscalConfig,
    month_key,
)


@dataclass
class ValidationError:
    """
    Represents a single validation error with context.

    Attributes:
        field_name: The input that failed validation.
        value: The invalid value that was provided.
        message: A user-facing error message.
        position: 1-based index for repeated inputs, None otherwise.
    """

    field_name: str
    value: str
    message: str
    position: Optional[int] = None

    def __str__(self) -> str:
        """Returns a formatted error message for console display."""
        if self.position is None:
            return f"Error: '{self.field_name}' - {self.message}"
        return f"Error: '{self.field_name}' #{self.position} - {self.message}"


@dataclass
class ValidationResult:
    """
    Container for input validation results.

    Attributes:
        config: Parsed fiscal configuration, None if invalid.
        mode: Parsed display mode, None if invalid.
        anchor: Parsed anchor date, None if invalid or not given.
        selections: Parsed selections (dates or "YYYY-MM" keys).
        errors: List of ValidationError objects.
    """

    config: Optional[FiscalConfig] = None
    mode: Optional[DisplayMode] = None
    anchor: Optional[date] = None
    selections: List[Union[date, str]] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Returns True if validation produced no errors."""
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        """Returns the number of validation errors."""
        return len(self.errors)


class InputValidator:
    """
    Validates picker inputs and converts them to typed values.

    Example:
        >>> validator = InputValidator()
        >>> result = validator.validate("April", "date", "2024-03", ["2024-03-15"])
        >>> result.config.start_month
        4
    """

    DATE_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})$")
    MONTH_PATTERN = re.compile(r"^([0-9]{4})-([0-9]{1,2})$")

    def validate(
        self,
        start_month: Union[str, int, None],
        mode: Union[str, DisplayMode, None],
        anchor: Optional[str] = None,
        selections: Optional[List[str]] = None
    ) -> ValidationResult:
        """
        Validates a complete set of picker inputs.

        Selections are only checked when the mode is valid, since the
        mode decides whether they are days or months.

        Args:
            start_month: Fiscal start month as number or name.
                None selects the default (January).
            mode: "date" or "yearMonth". None selects date mode.
            anchor: Anchor month or day. None leaves the anchor unset.
            selections: Values to select.

        Returns:
            ValidationResult with parsed values and any errors.
        """
        result = ValidationResult()

        config, config_error = self.parse_start_month(start_month)
        result.config = config
        if config_error:
            result.errors.append(config_error)

        parsed_mode, mode_error = self.parse_mode(mode)
        result.mode = parsed_mode
        if mode_error:
            result.errors.append(mode_error)

        if anchor is not None:
            parsed_anchor, anchor_error = self.parse_anchor(anchor)
            result.anchor = parsed_anchor
            if anchor_error:
                result.errors.append(anchor_error)

        if parsed_mode is not None:
            for position, value in enumerate(selections or [], start=1):
                selection, error = self.parse_selection(value, parsed_mode, position)
                if error:
                    result.errors.append(error)
                else:
                    result.selections.append(selection)

        return result

    def parse_start_month(
        self,
        value: Union[str, int, None]
    ) -> Tuple[Optional[FiscalConfig], Optional[ValidationError]]:
        """
        Parses a fiscal start month given as a number or a month name.

        Args:
            value: "4", "04", 4, "April" or "apr". None means January.

        Returns:
            Tuple of (FiscalConfig or None, ValidationError or None).
        """
        if value is None:
            return FiscalConfig(DEFAULT_START_MONTH), None

        text = str(value).strip()
        month = self._month_from_text(text)
        if month is None:
            return None, ValidationError(
                field_name="start-month",
                value=text,
                message=f"Start month must be 1-12 or a month name (received: '{text}')"
            )

        try:
            return FiscalConfig(month), None
        except InvalidConfigError as exc:
            return None, ValidationError(
                field_name="start-month",
                value=text,
                message=str(exc)
            )

    def parse_mode(
        self,
        value: Union[str, DisplayMode, None]
    ) -> Tuple[Optional[DisplayMode], Optional[ValidationError]]:
        """
        Parses a display mode.

        Returns:
            Tuple of (DisplayMode or None, ValidationError or None).
        """
        if value is None:
            return DisplayMode.DATE, None
        if isinstance(value, DisplayMode):
            return value, None

        text = value.strip()
        for mode in DisplayMode:
            if text.lower() == mode.value.lower():
                return mode, None
        return None, ValidationError(
            field_name="mode",
            value=text,
            message=f"Mode must be 'date' or 'yearMonth' (received: '{text}')"
        )

    def parse_anchor(
        self,
        value: str
    ) -> Tuple[Optional[date], Optional[ValidationError]]:
        """
        Parses an anchor given as "YYYY-MM" or "YYYY-MM-DD".

        Returns:
            Tuple of (date or None, ValidationError or None).
        """
        text = value.strip()
        try:
            if self.MONTH_PATTERN.match(text):
                return self._parse_month(text), None
            return self._parse_date(text), None
        except MalformedDateError as exc:
            return None, ValidationError(
                field_name="anchor",
                value=text,
                message=str(exc)
            )

    def parse_selection(
        self,
        value: str,
        mode: DisplayMode,
        position: Optional[int] = None
    ) -> Tuple[Union[date, str, None], Optional[ValidationError]]:
        """
        Parses one selection for the given mode.

        Args:
            value: "YYYY-MM-DD" in date mode, "YYYY-MM" in year-month mode.
            mode: Display mode the selection belongs to.
            position: 1-based position for error reporting.

        Returns:
            Tuple of (date or month key or None, ValidationError or None).
        """
        text = value.strip()
        try:
            if mode == DisplayMode.DATE:
                return self._parse_date(text), None
            first_day = self._parse_month(text)
            return month_key(first_day.year, first_day.month), None
        except MalformedDateError as exc:
            return None, ValidationError(
                field_name="select",
                value=text,
                message=str(exc),
                position=position
            )

    def _month_from_text(self, text: str) -> Optional[int]:
        """
        Converts a month number or English/locale month name to 1-12.

        Returns None when the text is neither; range checks are left
        to FiscalConfig.
        """
        if re.match(r"^-?[0-9]+$", text):
            return int(text)

        lowered = text.lower()
        for month in range(1, 13):
            if lowered in (calendar.month_name[month].lower(), calendar.month_abbr[month].lower()):
                return month
        return None

    def _parse_date(self, text: str) -> date:
        match = self.DATE_PATTERN.match(text)
        if not match:
            raise MalformedDateError(f"Date must look like YYYY-MM-DD (received: '{text}')")
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError as exc:
            raise MalformedDateError(f"'{text}' is not a valid calendar day") from exc

    def _parse_month(self, text: str) -> date:
        match = self.MONTH_PATTERN.match(text)
        if not match:
            raise MalformedDateError(f"Month must look like YYYY-MM (received: '{text}')")
        try:
            return date(int(match.group(1)), int(match.group(2)), 1)
        except ValueError as exc:
            raise MalformedDateError(f"'{text}' is not a valid calendar month") from exc
