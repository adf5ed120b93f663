"""
Progress report tables — completion state as DataFrames.

Feeds the Excel export (utils/excel_formatter.py) and the progress tables in
the UI.  Totals count every record of the planogram, including rows whose
bay could not be parsed, so exported totals match the tracker's
whole-planogram progress.

Public API:
    placements_table(index, completed_ids) → DataFrame
    bay_summary(index, completed_ids) → DataFrame
"""

import logging

import pandas as pd

from analysis.planogram_index import PlanogramIndex

logger = logging.getLogger(__name__)

PLACEMENT_COLUMNS: list[str] = [
    "POG",
    "Bay",
    "Position",
    "Peg",
    "UPC",
    "Description",
    "Width (in)",
    "Height (in)",
    "Done",
    "Placement ID",
]

SUMMARY_COLUMNS: list[str] = ["Bay", "Done", "Total", "Percent"]


def placements_table(index: PlanogramIndex, completed_ids: frozenset[str] | set[str]) -> pd.DataFrame:
    """One row per placement: bays in order, then records with no valid bay."""
    ordered = [r for bay in index.all_bays() for r in index.items_in_bay(bay)]
    ordered += [r for r in index.records if r.bay_number is None]

    rows = [
        {
            "POG": record.planogram_id,
            "Bay": record.bay_number if record.bay_number is not None else record.bay,
            "Position": record.position,
            "Peg": f"R{record.peg.row} C{record.peg.col}",
            "UPC": record.upc,
            "Description": record.description,
            "Width (in)": record.width_in,
            "Height (in)": record.height_in,
            "Done": record.placement_id in completed_ids,
            "Placement ID": record.placement_id,
        }
        for record in ordered
    ]
    return pd.DataFrame(rows, columns=PLACEMENT_COLUMNS)


def bay_summary(index: PlanogramIndex, completed_ids: frozenset[str] | set[str]) -> pd.DataFrame:
    """
    Done / total / percent per bay, plus a final "All" row.

    Records without a valid bay appear only in the "All" row.
    """
    rows = []
    for bay in index.all_bays():
        items = index.items_in_bay(bay)
        done = sum(1 for r in items if r.placement_id in completed_ids)
        rows.append(_summary_row(bay, done, len(items)))

    done_all = sum(1 for r in index.records if r.placement_id in completed_ids)
    rows.append(_summary_row("All", done_all, len(index.records)))

    logger.debug(f"Built bay summary for '{index.planogram_id}': {len(rows) - 1} bays")
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def _summary_row(bay: int | str, done: int, total: int) -> dict:
    percent = round(done / total * 100) if total else 0
    return {"Bay": bay, "Done": done, "Total": total, "Percent": percent}
