"""
Tests for utils/excel_formatter.py

Covers: sheet creation, auto-filter and frozen header, green completed-row
fill, Yes/No done column, number formats, summary header rows, the optional
data quality sheet, and empty tables.
"""

from pathlib import Path

import openpyxl
import pandas as pd
import pytest

from analysis.progress_report import PLACEMENT_COLUMNS, SUMMARY_COLUMNS
from processing.quality_checker import QualityReport
from utils.excel_formatter import export_progress


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_placements(done: list[bool]) -> pd.DataFrame:
    rows = len(done)
    return pd.DataFrame({
        "POG": ["P1"] * rows,
        "Bay": list(range(1, rows + 1)),
        "Position": [1] * rows,
        "Peg": ["R1 C1"] * rows,
        "UPC": [f"00{i}" for i in range(rows)],
        "Description": ["Widget"] * rows,
        "Width (in)": [3.0] * rows,
        "Height (in)": [6.0] * rows,
        "Done": done,
        "Placement ID": [f"P1|{i}|1|{i}" for i in range(rows)],
    }, columns=PLACEMENT_COLUMNS)


def _make_summary() -> pd.DataFrame:
    return pd.DataFrame(
        [{"Bay": 1, "Done": 1, "Total": 2, "Percent": 50},
         {"Bay": "All", "Done": 1, "Total": 2, "Percent": 50}],
        columns=SUMMARY_COLUMNS,
    )


def _make_quality_report() -> QualityReport:
    return QualityReport(
        total_rows=3,
        records_loaded=2,
        rejected_rows=[{"row": 2, "reason": "missing UPC", "values": {}}],
        defaulted=[{"row": 0, "column": "Peg", "original": "??", "default": "R1 C1"}],
        is_clean=False,
    )


@pytest.fixture
def workbook_path(tmp_path) -> Path:
    path = export_progress(
        placements=_make_placements([True, False]),
        summary=_make_summary(),
        quality_report=_make_quality_report(),
        store_id="0042",
        output_path=tmp_path / "out" / "progress.xlsx",
    )
    return path


# ═══════════════════════════════════════════════════════════════════════════
# Tests
# ═══════════════════════════════════════════════════════════════════════════

class TestExportProgress:
    def test_sheets_created(self, workbook_path):
        wb = openpyxl.load_workbook(workbook_path)
        assert wb.sheetnames == ["Placements", "Bay Summary", "Data Quality"]

    def test_quality_sheet_optional(self, tmp_path):
        path = export_progress(_make_placements([False]), _make_summary(), None,
                               "1", tmp_path / "p.xlsx")
        assert openpyxl.load_workbook(path).sheetnames == ["Placements", "Bay Summary"]

    def test_header_filter_and_freeze(self, workbook_path):
        ws = openpyxl.load_workbook(workbook_path)["Placements"]
        assert [c.value for c in ws[1]] == PLACEMENT_COLUMNS
        assert ws.auto_filter.ref == "A1:J3"
        assert ws.freeze_panes == "A2"

    def test_done_rows_filled_green(self, workbook_path):
        ws = openpyxl.load_workbook(workbook_path)["Placements"]
        assert ws["A2"].fill.start_color.rgb.endswith("C6EFCE")
        assert ws["A3"].fill.fill_type is None

    def test_done_written_as_yes_no(self, workbook_path):
        ws = openpyxl.load_workbook(workbook_path)["Placements"]
        assert ws["I2"].value == "Yes"
        assert ws["I3"].value == "No"

    def test_upc_stays_text(self, workbook_path):
        ws = openpyxl.load_workbook(workbook_path)["Placements"]
        assert ws["E2"].value == "000"

    def test_number_format(self, workbook_path):
        ws = openpyxl.load_workbook(workbook_path)["Placements"]
        assert ws["G2"].number_format == "0.0"

    def test_summary_sheet(self, workbook_path):
        ws = openpyxl.load_workbook(workbook_path)["Bay Summary"]
        assert ws["A1"].value == "Store"
        assert ws["B1"].value == "0042"
        assert ws["A2"].value == "Exported"
        assert [c.value for c in ws[4]] == SUMMARY_COLUMNS
        assert ws["A6"].value == "All"
        assert ws["D6"].value == 50

    def test_quality_sheet_lists_issues(self, workbook_path):
        ws = openpyxl.load_workbook(workbook_path)["Data Quality"]
        values = [c.value for row in ws.iter_rows() for c in row if c.value is not None]
        assert "Data Quality Report" in values
        assert "missing UPC" in values
        assert "??" in values

    def test_empty_placements(self, tmp_path):
        path = export_progress(_make_placements([]), _make_summary(), None,
                               "1", tmp_path / "p.xlsx")
        ws = openpyxl.load_workbook(path)["Placements"]
        assert ws.max_row == 1
