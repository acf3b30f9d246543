"""
FiscalPicker - Excel Report Generation Module.

This module writes a calendar snapshot to an Excel workbook: the day
grid with its fiscal week column, the month grid with fiscal years, and
a list of every selection with its fiscal annotations.

Formatting:
    - Days outside the anchored month in grey
    - Selected days and months highlighted
    - Today and the current month in bold

Classes:
    ExcelReporter: Generates Excel workbooks from calendar snapshots.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from fiscal_picker.fiscal_logic import FiscalCalculator
from fiscal_picker.labels import LabelFormatter
from fiscal_picker.schema import (
    DAYS_PER_WEEK,
    CalendarSnapshot,
    FiscalConfig,
    parse_month_key,
)


class ExcelReporter:
    """
    Generates Excel reports for calendar snapshots.

    Creates workbooks with Month View, Year View and Selections sheets.

    Attributes:
        DATE_FORMAT: Excel number format for dates.

    Example:
        >>> reporter = ExcelReporter()
        >>> reporter.generate_report(snapshot, "fiscal_calendar.xlsx")
    """

    DATE_FORMAT = "yyyy-mm-dd"

    SELECTED_FILL = PatternFill(
        start_color="DBEAFE",
        end_color="DBEAFE",
        fill_type="solid"
    )
    OUTSIDE_MONTH_FONT = Font(color="9CA3AF")
    TODAY_FONT = Font(bold=True)

    HEADER_FONT = Font(bold=True, color="FFFFFF")
    HEADER_FILL = PatternFill(
        start_color="2F5496",
        end_color="2F5496",
        fill_type="solid"
    )
    HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")

    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    def __init__(
        self,
        calculator: Optional[FiscalCalculator] = None,
        formatter: Optional[LabelFormatter] = None
    ):
        """
        Initialises the ExcelReporter.

        Args:
            calculator: Fiscal calculator for selection annotations.
            formatter: Label formatter for month and weekday names.
        """
        self._calculator = calculator or FiscalCalculator()
        self._formatter = formatter or LabelFormatter()

    def generate_report(
        self,
        snapshot: CalendarSnapshot,
        output_path: Union[str, Path]
    ) -> None:
        """
        Generates a complete Excel report from a snapshot.

        Creates a workbook with three sheets:
        1. Month View - Day grid with fiscal week column
        2. Year View - Month grid with fiscal years
        3. Selections - Selected dates and months with annotations

        Args:
            snapshot: Calendar snapshot.
            output_path: Path for the output .xlsx file.
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()

        # Remove default sheet
        workbook.remove(workbook.active)

        config = FiscalConfig(snapshot.start_month)
        self._create_month_sheet(workbook, snapshot)
        self._create_year_sheet(workbook, snapshot, config)
        self._create_selection_sheet(workbook, snapshot, config)

        workbook.save(output_path)

    def _write_title(self, ws: Worksheet, title: str, snapshot: CalendarSnapshot) -> None:
        ws["A1"] = title
        ws["A1"].font = Font(bold=True, size=16)
        ws.merge_cells("A1:H1")
        ws["A2"] = "Fiscal year starts:"
        ws["B2"] = self._formatter.month_name(snapshot.start_month)

    def _write_header(self, ws: Worksheet, row: int, headers: list) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.HEADER_FONT
            cell.fill = self.HEADER_FILL
            cell.alignment = self.HEADER_ALIGNMENT
            cell.border = self.THIN_BORDER

    def _create_month_sheet(
        self,
        workbook: Workbook,
        snapshot: CalendarSnapshot
    ) -> None:
        """
        Creates the Month View sheet: one row per week, Monday first,
        prefixed with the fiscal week of the row's first day.

        Args:
            workbook: Target workbook.
            snapshot: Calendar data.
        """
        ws = workbook.create_sheet("Month View")
        anchor_label = (
            f"{self._formatter.month_name(snapshot.anchor.month)} {snapshot.anchor.year}"
        )
        self._write_title(ws, f"FiscalPicker - {anchor_label}", snapshot)

        self._write_header(ws, 4, ["Week"] + self._formatter.weekday_headers())

        selected = set(snapshot.selected_dates)
        cells = snapshot.day_cells
        for row_offset, start in enumerate(range(0, len(cells), DAYS_PER_WEEK)):
            row = 5 + row_offset
            week = cells[start:start + DAYS_PER_WEEK]

            week_cell = ws.cell(row=row, column=1, value=week[0].fiscal_week)
            week_cell.font = Font(bold=True)
            week_cell.border = self.THIN_BORDER

            for col, day_cell in enumerate(week, start=2):
                cell = ws.cell(row=row, column=col, value=day_cell.date.day)
                cell.alignment = self.HEADER_ALIGNMENT
                cell.border = self.THIN_BORDER
                if not day_cell.in_current_month:
                    cell.font = self.OUTSIDE_MONTH_FONT
                elif day_cell.is_today:
                    cell.font = self.TODAY_FONT
                if day_cell.date in selected:
                    cell.fill = self.SELECTED_FILL

        self._auto_adjust_columns(ws)

    def _create_year_sheet(
        self,
        workbook: Workbook,
        snapshot: CalendarSnapshot,
        config: FiscalConfig
    ) -> None:
        """
        Creates the Year View sheet: one row per calendar month.

        Args:
            workbook: Target workbook.
            snapshot: Calendar data.
            config: Fiscal configuration of the snapshot.
        """
        ws = workbook.create_sheet("Year View")
        self._write_title(ws, f"FiscalPicker - {snapshot.anchor.year}", snapshot)

        self._write_header(ws, 4, ["Month", "Key", "Fiscal Year", "Fiscal Period", "Selected"])

        selected = set(snapshot.selected_months)
        for row, month_cell in enumerate(snapshot.month_cells, start=5):
            is_selected = month_cell.year_month_key in selected
            row_data = [
                self._formatter.month_name(month_cell.date.month),
                month_cell.year_month_key,
                f"FY{month_cell.fiscal_year}",
                self._calculator.fiscal_month(month_cell.date, config),
                "Yes" if is_selected else "",
            ]
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = self.THIN_BORDER
                if month_cell.is_current_month:
                    cell.font = self.TODAY_FONT
                if is_selected:
                    cell.fill = self.SELECTED_FILL

        self._auto_adjust_columns(ws)

    def _create_selection_sheet(
        self,
        workbook: Workbook,
        snapshot: CalendarSnapshot,
        config: FiscalConfig
    ) -> None:
        """
        Creates the Selections sheet listing both selection sets.

        Args:
            workbook: Target workbook.
            snapshot: Calendar data.
            config: Fiscal configuration of the snapshot.
        """
        ws = workbook.create_sheet("Selections")

        ws["A1"] = "Selected Dates"
        ws["A1"].font = Font(bold=True, size=14)
        self._write_header(ws, 2, ["Date", "Weekday", "Fiscal Week", "Fiscal Year"])

        row = 3
        for day in snapshot.selected_dates:
            row_data = [
                day,
                self._formatter.weekday_abbr(day.weekday()),
                self._calculator.fiscal_week(day, config),
                f"FY{self._calculator.fiscal_year(day, config)}",
            ]
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = self.THIN_BORDER
            ws.cell(row=row, column=1).number_format = self.DATE_FORMAT
            row += 1

        row += 1
        ws.cell(row=row, column=1, value="Selected Months").font = Font(bold=True, size=14)
        row += 1
        self._write_header(ws, row, ["Month", "Fiscal Year"])
        row += 1

        for key in snapshot.selected_months:
            year, month = parse_month_key(key)
            first_day = date(year, month, 1)
            row_data = [key, f"FY{self._calculator.fiscal_year(first_day, config)}"]
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = self.THIN_BORDER
            row += 1

        self._auto_adjust_columns(ws)

    def _auto_adjust_columns(self, worksheet: Worksheet) -> None:
        """
        Auto-adjusts column widths based on content.

        Args:
            worksheet: Target worksheet.
        """
        for col_idx in range(1, worksheet.max_column + 1):
            max_length = 0
            column_letter = get_column_letter(col_idx)

            for row_idx in range(3, worksheet.max_row + 1):
                value = worksheet.cell(row=row_idx, column=col_idx).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            worksheet.column_dimensions[column_letter].width = max(max_length + 2, 8)

    def generate_filename(self, prefix: str = "fiscal_calendar") -> str:
        """
        Generates a timestamped filename for reports.

        Args:
            prefix: Filename prefix. Defaults to "fiscal_calendar".

        Returns:
            Filename like "fiscal_calendar_2024-12-18_143052.xlsx".
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        return f"{prefix}_{timestamp}.xlsx"
