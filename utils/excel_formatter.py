"""
Excel formatter — writes the planogram progress workbook.

Sheet 1: "Placements"   — one row per placement, auto-filter, completed rows
                          filled green.
Sheet 2: "Bay Summary"  — done / total / percent per bay plus an "All" row.
Sheet 3: "Data Quality" — load summary and every default or rejection from
                          the quality report.

Public API:
    export_progress(placements, summary, quality_report, store_id,
                    output_path) → Path
"""

import logging
from datetime import datetime
from pathlib import Path

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
import pandas as pd

from processing.quality_checker import QualityReport

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Constants
# ═══════════════════════════════════════════════════════════════════════════

_DONE_FILL = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
_YELLOW_FILL = PatternFill(start_color="FFFF00", end_color="FFFF00", fill_type="solid")
_HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
_HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)
_NORMAL_FONT = Font(size=10)
_BOLD_FONT = Font(bold=True, size=10)

_MAX_COL_WIDTH = 50
_MIN_COL_WIDTH = 8

_NUMBER_FORMATS: dict[str, str] = {
    "Width (in)": "0.0",
    "Height (in)": "0.0",
    "Percent": '0"%"',
}


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def export_progress(
    placements: pd.DataFrame,
    summary: pd.DataFrame,
    quality_report: QualityReport | None,
    store_id: str,
    output_path: Path,
) -> Path:
    """
    Write the progress workbook.

    Args:
        placements: Output of progress_report.placements_table().
        summary: Output of progress_report.bay_summary().
        quality_report: Load quality report, or None to skip that sheet.
        store_id: Active store, written into the summary sheet.
        output_path: Where the .xlsx file should be saved.

    Returns:
        The output_path.
    """
    workbook = openpyxl.Workbook()

    placements_sheet = workbook.active
    placements_sheet.title = "Placements"
    _write_table(placements_sheet, placements, done_column="Done")

    summary_sheet = workbook.create_sheet("Bay Summary")
    _write_summary_sheet(summary_sheet, summary, store_id)

    if quality_report is not None:
        quality_sheet = workbook.create_sheet("Data Quality")
        _write_quality_sheet(quality_sheet, quality_report)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(str(output_path))
    workbook.close()

    logger.info(f"Progress workbook saved to '{output_path}'")
    return output_path


# ═══════════════════════════════════════════════════════════════════════════
# Sheets
# ═══════════════════════════════════════════════════════════════════════════

def _write_table(
    worksheet: openpyxl.worksheet.worksheet.Worksheet,
    dataframe: pd.DataFrame,
    done_column: str | None = None,
    start_row: int = 1,
) -> int:
    """Write a header + rows table; returns the next free row."""
    columns = list(dataframe.columns)
    _write_header(worksheet, start_row, columns)

    for row_offset, df_idx in enumerate(dataframe.index):
        excel_row = start_row + 1 + row_offset
        is_done = done_column is not None and bool(dataframe.at[df_idx, done_column])

        for col_idx, col_name in enumerate(columns, start=1):
            value = dataframe.at[df_idx, col_name]
            if not isinstance(value, str) and pd.isna(value):
                value = None
            elif col_name == done_column:
                value = "Yes" if value else "No"
            elif hasattr(value, "item"):
                # numpy scalars → plain Python values for openpyxl
                value = value.item()

            cell = worksheet.cell(row=excel_row, column=col_idx, value=value)
            cell.font = _NORMAL_FONT
            if col_name in _NUMBER_FORMATS:
                cell.number_format = _NUMBER_FORMATS[col_name]
            if is_done:
                cell.fill = _DONE_FILL

    last_row = start_row + len(dataframe)
    if columns:
        worksheet.auto_filter.ref = (
            f"A{start_row}:{get_column_letter(len(columns))}{last_row}"
        )
    if start_row == 1:
        worksheet.freeze_panes = "A2"

    _auto_fit_column_widths(worksheet)
    return last_row + 1


def _write_summary_sheet(
    worksheet: openpyxl.worksheet.worksheet.Worksheet,
    summary: pd.DataFrame,
    store_id: str,
) -> None:
    worksheet.cell(row=1, column=1, value="Store").font = _BOLD_FONT
    worksheet.cell(row=1, column=2, value=store_id).font = _NORMAL_FONT
    worksheet.cell(row=2, column=1, value="Exported").font = _BOLD_FONT
    worksheet.cell(row=2, column=2, value=datetime.now().strftime("%Y-%m-%d %H:%M")).font = _NORMAL_FONT

    _write_table(worksheet, summary, start_row=4)


def _write_quality_sheet(
    worksheet: openpyxl.worksheet.worksheet.Worksheet,
    report: QualityReport,
) -> None:
    current_row = 1
    worksheet.cell(row=current_row, column=1, value="Data Quality Report").font = Font(bold=True, size=14)
    current_row += 2

    summary_items = [
        ("Total Rows", report.total_rows),
        ("Placements Loaded", report.records_loaded),
        ("Rows Rejected", len(report.rejected_rows)),
        ("Defaults Applied", len(report.defaulted)),
        ("Duplicate Placements", len(report.duplicate_placements)),
        ("Data Is Clean", "Yes" if report.is_clean else "No"),
    ]
    for label, value in summary_items:
        worksheet.cell(row=current_row, column=1, value=label).font = _BOLD_FONT
        worksheet.cell(row=current_row, column=2, value=value).font = _NORMAL_FONT
        current_row += 1

    if report.defaulted:
        current_row += 1
        _write_header(worksheet, current_row, ["Row", "Column", "Original", "Default Used"])
        current_row += 1
        for entry in report.defaulted:
            values = [entry.get("row"), entry.get("column"), entry.get("original"), entry.get("default")]
            for col_idx, value in enumerate(values, start=1):
                cell = worksheet.cell(row=current_row, column=col_idx, value=_plain(value))
                cell.font = _NORMAL_FONT
                cell.fill = _YELLOW_FILL
            current_row += 1

    if report.rejected_rows:
        current_row += 1
        _write_header(worksheet, current_row, ["Row", "Reason"])
        current_row += 1
        for entry in report.rejected_rows:
            worksheet.cell(row=current_row, column=1, value=_plain(entry.get("row"))).font = _NORMAL_FONT
            worksheet.cell(row=current_row, column=2, value=entry.get("reason")).font = _NORMAL_FONT
            current_row += 1

    _auto_fit_column_widths(worksheet)


# ═══════════════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════════════

def _write_header(
    worksheet: openpyxl.worksheet.worksheet.Worksheet,
    row: int,
    headers: list[str],
) -> None:
    for col_idx, header in enumerate(headers, start=1):
        cell = worksheet.cell(row=row, column=col_idx, value=header)
        cell.fill = _HEADER_FILL
        cell.font = _HEADER_FONT
        cell.alignment = Alignment(horizontal="center")


def _plain(value: object) -> object:
    if hasattr(value, "item"):
        return value.item()
    return value


def _auto_fit_column_widths(
    worksheet: openpyxl.worksheet.worksheet.Worksheet,
) -> None:
    """Width = longest value in the column, clamped to [_MIN, _MAX]."""
    for column_cells in worksheet.columns:
        max_length = _MIN_COL_WIDTH
        col_letter = get_column_letter(column_cells[0].column)

        for cell in column_cells:
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))

        worksheet.column_dimensions[col_letter].width = min(max_length + 2, _MAX_COL_WIDTH)
