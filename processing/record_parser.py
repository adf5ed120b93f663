"""
Record parser — the strict parse step from CSV rows to validated records.

Takes DataFrames whose columns are already mapped to canonical names
(output of csv_loader) and builds immutable PlacementRecord,
DeleteListEntry, and StoreMapping objects.  All default-substitution rules
are applied here, once, at load time:

  - UPC     → canonical_upc via normalize_upc()
  - Peg     → PegAddress, (1, 1) when unparseable
  - Width   → inches, 3.0 when blank/unparseable
  - Height  → inches, 6.0 when blank/unparseable
  - Bay     → bay_number, None when unparseable (row is kept)
  - Position → int, 0 when blank/unparseable

Rows without a POG or a UPC cannot produce a minimally valid record and are
rejected (reported, not raised).

Public API:
    parse_placement_rows(dataframe) → PlacementParseResult
    parse_delete_rows(dataframe) → list[DeleteListEntry]
    parse_store_rows(dataframe) → list[StoreMapping]
    parse_int(value) → int | None
"""

import logging
import re
from dataclasses import dataclass, field

import pandas as pd

from analysis.models import DeleteListEntry, PlacementRecord, StoreMapping
from analysis.peg_layout import (
    parse_dimension,
    parse_peg,
    try_parse_dimension,
    try_parse_peg,
)
from config.board import DEFAULT_HEIGHT_INCHES, DEFAULT_WIDTH_INCHES
from processing.upc_normalizer import normalize_upc

logger = logging.getLogger(__name__)

# Leading integer, e.g. "3", " 12 ", "4.0", "2A"
_LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class PlacementParseResult:
    """Records built from one planogram DataFrame plus what went wrong."""

    records: list[PlacementRecord] = field(default_factory=list)
    rejected_rows: list[dict] = field(default_factory=list)
    """{"row", "reason", "values"} for rows that produced no record."""

    defaulted: list[dict] = field(default_factory=list)
    """{"row", "column", "original", "default"} for substituted values."""

    duplicate_ids: list[str] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def parse_placement_rows(dataframe: pd.DataFrame) -> PlacementParseResult:
    """
    Build PlacementRecords from a planogram DataFrame.

    Args:
        dataframe: Canonical columns (POG, Bay, Peg, Position, UPC, Width,
                   Height, Description).  Optional columns may be absent.

    Returns:
        PlacementParseResult with records in input order.
    """
    result = PlacementParseResult()
    seen_ids: dict[str, int] = {}

    for source_row, (idx, row) in enumerate(dataframe.iterrows()):
        planogram_id = _cell(row, "POG")
        upc = _cell(row, "UPC")

        if not planogram_id or not upc:
            missing = "POG" if not planogram_id else "UPC"
            result.rejected_rows.append({
                "row": idx,
                "reason": f"missing {missing}",
                "values": {k: _cell(row, k) for k in row.index},
            })
            logger.warning(f"Rejected planogram row {idx}: missing {missing}")
            continue

        bay = _cell(row, "Bay")
        peg_raw = _cell(row, "Peg")
        peg = parse_peg(peg_raw)
        width_raw = _cell(row, "Width")
        height_raw = _cell(row, "Height")
        width_in = parse_dimension(width_raw, DEFAULT_WIDTH_INCHES)
        height_in = parse_dimension(height_raw, DEFAULT_HEIGHT_INCHES)
        bay_number = _parse_bay(bay)
        position_raw = _cell(row, "Position")
        position_value = parse_int(position_raw)
        position = position_value if position_value is not None else 0
        canonical_upc = normalize_upc(upc)

        _note_defaults(result, idx, bay, bay_number, position_raw, position_value,
                       peg_raw, width_raw, height_raw)

        base_id = _placement_id(planogram_id, bay, bay_number, position, canonical_upc)
        placement_id = base_id
        if base_id in seen_ids:
            seen_ids[base_id] += 1
            placement_id = f"{base_id}#{seen_ids[base_id]}"
            result.duplicate_ids.append(base_id)
            logger.debug(f"Duplicate placement '{base_id}' at row {idx} → '{placement_id}'")
        else:
            seen_ids[base_id] = 1

        result.records.append(PlacementRecord(
            planogram_id=planogram_id,
            bay=bay,
            bay_number=bay_number,
            peg=peg,
            peg_raw=peg_raw,
            position=position,
            upc=upc,
            canonical_upc=canonical_upc,
            width_in=width_in,
            height_in=height_in,
            description=_cell(row, "Description"),
            source_row=source_row,
            placement_id=placement_id,
        ))

    logger.info(
        f"Parsed {len(result.records)} placements "
        f"({len(result.rejected_rows)} rejected, {len(result.defaulted)} defaults applied)"
    )
    return result


def parse_delete_rows(dataframe: pd.DataFrame) -> list[DeleteListEntry]:
    """Delete-list entries; rows without POG or UPC are skipped."""
    entries: list[DeleteListEntry] = []

    for idx, row in dataframe.iterrows():
        planogram_id = _cell(row, "POG")
        upc = _cell(row, "UPC")
        if not planogram_id or not upc:
            logger.debug(f"Skipping delete-list row {idx}: missing POG or UPC")
            continue

        entries.append(DeleteListEntry(
            planogram_id=planogram_id,
            upc=upc,
            canonical_upc=normalize_upc(upc),
            product_name=_cell(row, "Description"),
        ))

    logger.info(f"Parsed {len(entries)} delete-list entries")
    return entries


def parse_store_rows(dataframe: pd.DataFrame) -> list[StoreMapping]:
    """Store → planogram rows; incomplete rows are skipped."""
    mappings: list[StoreMapping] = []

    for idx, row in dataframe.iterrows():
        store_id = _cell(row, "Store")
        planogram_id = _cell(row, "POG")
        if not store_id or not planogram_id:
            logger.debug(f"Skipping store mapping row {idx}: missing Store or POG")
            continue
        mappings.append(StoreMapping(store_id=store_id, planogram_id=planogram_id))

    logger.info(f"Parsed {len(mappings)} store mappings")
    return mappings


def parse_int(value: object) -> int | None:
    """Leading integer of a cell ("12" → 12, "2A" → 2), or None."""
    if value is None:
        return None
    match = _LEADING_INT_PATTERN.match(str(value))
    if not match:
        return None
    return int(match.group(1))


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _cell(row: pd.Series, column: str) -> str:
    """Stripped cell text; "" for absent columns and NaN."""
    if column not in row.index:
        return ""
    value = row[column]
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def _parse_bay(bay: str) -> int | None:
    bay_number = parse_int(bay)
    if bay_number is None or bay_number < 1:
        return None
    return bay_number


def _placement_id(
    planogram_id: str,
    bay: str,
    bay_number: int | None,
    position: int,
    canonical_upc: str,
) -> str:
    bay_key = str(bay_number) if bay_number is not None else bay
    return f"{planogram_id}|{bay_key}|{position}|{canonical_upc}"


def _note_defaults(
    result: PlacementParseResult,
    idx: object,
    bay: str,
    bay_number: int | None,
    position_raw: str,
    position_value: int | None,
    peg_raw: str,
    width_raw: str,
    height_raw: str,
) -> None:
    """Record every default substitution so the quality report can show it."""
    if bay_number is None:
        result.defaulted.append({
            "row": idx, "column": "Bay", "original": bay, "default": "(excluded from bays)",
        })
    if position_value is None:
        result.defaulted.append({
            "row": idx, "column": "Position", "original": position_raw, "default": 0,
        })
    if try_parse_peg(peg_raw) is None:
        result.defaulted.append({
            "row": idx, "column": "Peg", "original": peg_raw, "default": "R1 C1",
        })
    if try_parse_dimension(width_raw) is None:
        result.defaulted.append({
            "row": idx, "column": "Width", "original": width_raw,
            "default": DEFAULT_WIDTH_INCHES,
        })
    if try_parse_dimension(height_raw) is None:
        result.defaulted.append({
            "row": idx, "column": "Height", "original": height_raw,
            "default": DEFAULT_HEIGHT_INCHES,
        })
