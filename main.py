"""
FiscalPicker - Main Entry Point.

Renders a fiscal calendar view on the console and exports it.
Shows the day grid of a month with fiscal week numbers (date mode) or
the month grid of a year with fiscal years (year-month mode).

Usage:
    python main.py [--start-month M] [--mode date|yearMonth]
                   [--anchor YYYY-MM] [--step N] [--select VALUE ...]
                   [--output-dir <dir>] [--no-export]

Example:
    python main.py --start-month April --anchor 2024-02 --select 2024-02-29
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from fiscal_picker import __version__
from fiscal_picker.audit import AuditLogger
from fiscal_picker.errors import FiscalPickerError
from fiscal_picker.excel_generator import ExcelReporter
from fiscal_picker.schema import DisplayMode
from fiscal_picker.session import PickerSession
from fiscal_picker.validator import InputValidator


def print_header() -> None:
    """Prints the application header."""
    print("=" * 60)
    print("  FiscalPicker - Fiscal Calendar")
    print(f"  Version: {__version__}")
    print("=" * 60)
    print()


def print_fiscal_context(session: PickerSession, reference_date: date) -> None:
    """
    Prints the fiscal year that contains the anchor.

    Args:
        session: Picker session.
        reference_date: Date flagged as today.
    """
    calculator = session.calculator
    config = session.config
    start = calculator.fiscal_year_start(session.anchor, config)
    end = calculator.fiscal_year_end(session.anchor, config)
    fiscal_year = calculator.fiscal_year(session.anchor, config)

    print(f"  Fiscal year starts: {session.formatter.month_name(config.start_month)}")
    print(f"  FY{fiscal_year}:             {start.isoformat()} to {end.isoformat()}")
    print(
        f"  Today:              {reference_date.isoformat()} "
        f"(week {calculator.fiscal_week(reference_date, config)}, "
        f"FY{calculator.fiscal_year(reference_date, config)})"
    )
    print()


def print_month_view(session: PickerSession, reference_date: date) -> None:
    """
    Prints the day grid with its fiscal week column.

    Days outside the month are shown in brackets, selected days are
    marked with '*' and today with '!'.

    Args:
        session: Picker session in date mode.
        reference_date: Date flagged as today.
    """
    print(f"  {session.display_label()}")
    print("  " + "-" * 40)
    headers = "".join(f"{name[:2]:>5}" for name in session.formatter.weekday_headers())
    print(f"  {'Wk':>3}{headers}")

    for row in session.week_rows(reference_date):
        line = ""
        for cell in row.cells:
            text = str(cell.date.day)
            if not cell.in_current_month:
                text = f"({text})"
            marker = "*" if session.date_selection.is_selected(cell.date) else " "
            if cell.is_today:
                marker = "!" if marker == " " else marker
            line += f"{text:>4}{marker}"
        print(f"  {row.fiscal_week:>3}{line}")
    print()


def print_year_view(session: PickerSession, reference_date: date) -> None:
    """
    Prints the month grid, three months per line, with fiscal years.

    Args:
        session: Picker session in year-month mode.
        reference_date: Date whose month is flagged as current.
    """
    print(f"  {session.display_label()}")
    print("  " + "-" * 40)

    cells = session.year_grid(reference_date)
    for start in range(0, len(cells), 3):
        line = ""
        for cell in cells[start:start + 3]:
            marker = "*" if session.month_selection.is_selected(cell) else " "
            if cell.is_current_month:
                marker = "!" if marker == " " else marker
            name = session.formatter.month_abbr(cell.date.month)
            line += f"  {name:<4}FY{cell.fiscal_year}{marker}"
        print(f" {line}")
    print()


def print_selection_summary(session: PickerSession) -> None:
    """
    Prints the active selection set.

    Args:
        session: Picker session.
    """
    print("  SELECTION")
    print("  " + "-" * 40)
    print(f"  {session.selection_summary()}")

    if session.mode == DisplayMode.DATE:
        calculator = session.calculator
        for day in session.selected_dates():
            print(
                f"  • {day.isoformat()}  week {calculator.fiscal_week(day, session.config)}"
                f"  FY{calculator.fiscal_year(day, session.config)}"
            )
    else:
        for key in session.selected_months():
            print(f"  • {key}")
    print()


def run_picker(
    start_month: Optional[str],
    mode: Optional[str],
    anchor: Optional[str],
    step: int,
    selections: List[str],
    output_dir: Optional[Path],
    reference_date: Optional[date] = None
) -> int:
    """
    Builds a picker session from the inputs, prints it and exports it.

    Args:
        start_month: Fiscal start month as number or name.
        mode: "date" or "yearMonth".
        anchor: Anchor month as "YYYY-MM" or "YYYY-MM-DD".
        step: Navigation steps to apply after anchoring.
        selections: Values to toggle in the active mode.
        output_dir: Directory for output files, None to skip export.
        reference_date: Date flagged as today. Defaults to today.

    Returns:
        Exit code (0 for success, 1 for errors).
    """
    print_header()

    if reference_date is None:
        reference_date = date.today()

    # Step 1: Validate inputs
    validator = InputValidator()
    result = validator.validate(start_month, mode, anchor, selections)

    if not result.is_valid:
        print(f"  ❌ INVALID INPUT ({result.error_count} errors):")
        for error in result.errors:
            print(f"     {error}")
        return 1

    # Step 2: Build session and navigate
    session = PickerSession(
        config=result.config,
        mode=result.mode,
        anchor=result.anchor or reference_date,
    )

    try:
        if step:
            session.step(step)
        for selection in result.selections:
            session.toggle(selection)

        # Step 3: Render
        print_fiscal_context(session, reference_date)
        if session.mode == DisplayMode.DATE:
            print_month_view(session, reference_date)
        else:
            print_year_view(session, reference_date)
        print_selection_summary(session)

        # Step 4: Export
        if output_dir is not None:
            snapshot = session.snapshot(reference_date)

            audit_logger = AuditLogger()
            audit_path = output_dir / audit_logger.generate_filename("fiscal_calendar")
            audit_logger.save_to_file(snapshot, audit_path)
            print(f"  ✓ Snapshot saved: {audit_path}")

            excel_reporter = ExcelReporter(session.calculator, session.formatter)
            excel_path = output_dir / excel_reporter.generate_filename("fiscal_calendar")
            excel_reporter.generate_report(snapshot, excel_path)
            print(f"  ✓ Excel report saved: {excel_path}")
            print()
    except FiscalPickerError as e:
        print(f"  ❌ ERROR: {e}")
        return 1

    print("=" * 60)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Command line arguments. Defaults to sys.argv.

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(
        description="FiscalPicker - Fiscal calendar date and month picker"
    )
    parser.add_argument(
        "--start-month",
        default=None,
        help="Fiscal year start month, number or name (default: January)"
    )
    parser.add_argument(
        "--mode",
        default=DisplayMode.DATE.value,
        help="Display mode: 'date' or 'yearMonth' (default: date)"
    )
    parser.add_argument(
        "--anchor",
        default=None,
        help="Month to display as YYYY-MM or YYYY-MM-DD (default: today)"
    )
    parser.add_argument(
        "--step",
        type=int,
        default=0,
        help="Months (date mode) or years (yearMonth mode) to move from the anchor"
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        help="Date (YYYY-MM-DD) or month (YYYY-MM) to select; repeatable"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Output directory for exports (default: output/)"
    )
    parser.add_argument(
        "--no-export",
        action="store_true",
        help="Print the view without writing export files"
    )

    args = parser.parse_args(argv)

    return run_picker(
        args.start_month,
        args.mode,
        args.anchor,
        args.step,
        args.select,
        None if args.no_export else args.output_dir,
    )


if __name__ == "__main__":
    sys.exit(main())
