"""
FiscalPicker - Error Types.

Classes:
    FiscalPickerError: Base class for all picker errors.
    InvalidConfigError: Fiscal configuration outside the supported range.
    MalformedDateError: Input that does not resolve to a valid calendar day.
"""


class FiscalPickerError(ValueError):
    """Base class for errors raised by the fiscal picker core."""


class InvalidConfigError(FiscalPickerError):
    """Raised when the fiscal start month is not an integer in 1-12."""


class MalformedDateError(FiscalPickerError):
    """
    Raised when a date, month key or navigation step does not resolve
    to a valid calendar day.

    This is a caller contract violation; it is reported, never recovered.
    """
