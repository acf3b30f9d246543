"""
FiscalPicker - Command Line Tests.

Unit tests for the main entry point: console rendering, input
error handling and export file creation.
"""

import tempfile
from datetime import date
from pathlib import Path

from main import main, run_picker


class TestRunPicker:
    """Unit tests for run_picker and main."""

    def test_date_mode_console_output(self, capsys) -> None:
        """Verify the month grid, fiscal context and selection are printed."""
        code = run_picker(
            "April", "date", "2024-02", 0, ["2024-02-29"], None,
            reference_date=date(2024, 2, 14)
        )
        out = capsys.readouterr().out

        assert code == 0
        assert "February 2024" in out
        assert "FY2024:             2023-04-01 to 2024-03-31" in out
        assert "1 date selected" in out
        assert "2024-02-29  week 49  FY2024" in out

    def test_year_mode_with_step(self, capsys) -> None:
        """Verify year-month mode steps by years and shows fiscal years."""
        code = run_picker(
            "4", "yearMonth", "2024-06", -1, ["2023-04"], None,
            reference_date=date(2024, 2, 14)
        )
        out = capsys.readouterr().out

        assert code == 0
        assert "  2023\n" in out
        assert "FY2024*" in out
        assert "1 month selected" in out

    def test_invalid_input_returns_error(self, capsys) -> None:
        """Verify invalid inputs are listed and the exit code is 1."""
        code = run_picker("13", "date", "2024-02-30", 0, [], None)
        out = capsys.readouterr().out

        assert code == 1
        assert "INVALID INPUT (2 errors)" in out
        assert "'start-month'" in out
        assert "'anchor'" in out

    def test_out_of_range_navigation_returns_error(self, capsys) -> None:
        """Verify stepping past year 9999 is reported, not raised."""
        code = run_picker("1", "yearMonth", "9999-01", 1, [], None)
        out = capsys.readouterr().out

        assert code == 1
        assert "ERROR" in out

    def test_export_failure_returns_error(self, capsys) -> None:
        """
        Verify a year-month export whose day grid leaves the date range
        is reported with exit code 1 and writes no files.

        December 9999 renders as a month grid, but its day grid would
        run into year 10000.
        """
        with tempfile.TemporaryDirectory() as tmpdir:
            code = run_picker(
                None, "yearMonth", "9999-12", 0, [], Path(tmpdir),
                reference_date=date(2024, 1, 1)
            )
            written = list(Path(tmpdir).iterdir())
        out = capsys.readouterr().out

        assert code == 1
        assert "ERROR" in out
        assert written == []

    def test_export_writes_files(self, capsys) -> None:
        """Verify JSON and Excel exports are written to the output directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            code = main([
                "--start-month", "4",
                "--anchor", "2024-02",
                "--select", "2024-02-29",
                "--output-dir", tmpdir,
            ])
            files = sorted(p.suffix for p in Path(tmpdir).iterdir())

        assert code == 0
        assert files == [".json", ".xlsx"]
        assert "Snapshot saved" in capsys.readouterr().out

    def test_no_export(self, capsys) -> None:
        """Verify --no-export skips writing files."""
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = Path(tmpdir) / "out"
            code = main(["--anchor", "2024-02", "--no-export", "--output-dir", str(output_dir)])

            assert code == 0
            assert not output_dir.exists()
