"""
Quality checker — summarises how clean a planogram data load was.

Shelf data is produced by hand and routinely imperfect.  The loader never
fails on bad rows; this report tells the operator what was substituted or
skipped so the data can be fixed at the source:

  1. Rejected rows: no POG or no UPC.
  2. Defaults applied: unparseable Peg (→ R1 C1), Width/Height (→ 3 x 6 in),
     Bay (→ excluded from bay navigation), Position (→ 0).
  3. Duplicate placements: two rows with the same POG/bay/position/UPC.
  4. Mapping gaps: stores whose planogram has no placement rows.

Public API:
    check_quality(data) → QualityReport
"""

import logging
from collections import Counter
from dataclasses import dataclass, field

from processing.csv_loader import PlanogramData

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class QualityReport:
    """Quality summary for one data load."""

    total_rows: int = 0
    records_loaded: int = 0
    rows_per_planogram: dict[str, int] = field(default_factory=dict)
    rejected_rows: list[dict] = field(default_factory=list)
    defaults_per_column: dict[str, int] = field(default_factory=dict)
    defaulted: list[dict] = field(default_factory=list)
    duplicate_placements: list[str] = field(default_factory=list)
    stores_without_data: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    is_clean: bool = True


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def check_quality(data: PlanogramData) -> QualityReport:
    """
    Build a QualityReport from a loaded PlanogramData.

    Args:
        data: Output of csv_loader.load_planogram_data().

    Returns:
        QualityReport.  is_clean is False when any row was rejected, any
        default was applied, or any placement was duplicated.
    """
    parse_result = data.parse_result
    report = QualityReport()

    report.records_loaded = len(data.records)
    report.rejected_rows = list(parse_result.rejected_rows)
    report.total_rows = report.records_loaded + len(report.rejected_rows)
    report.rows_per_planogram = dict(Counter(r.planogram_id for r in data.records))
    report.defaulted = list(parse_result.defaulted)
    report.defaults_per_column = dict(Counter(d["column"] for d in parse_result.defaulted))
    report.duplicate_placements = sorted(set(parse_result.duplicate_ids))
    report.stores_without_data = _stores_without_data(data, report.rows_per_planogram)
    report.warnings = list(data.warnings)

    report.is_clean = not (
        report.rejected_rows
        or report.defaulted
        or report.duplicate_placements
    )

    logger.info(
        f"Quality check complete: {report.records_loaded}/{report.total_rows} rows loaded, "
        f"clean={report.is_clean}, "
        f"{len(report.rejected_rows)} rejected, "
        f"{len(report.defaulted)} defaults, "
        f"{len(report.duplicate_placements)} duplicate placements"
    )
    return report


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _stores_without_data(data: PlanogramData, rows_per_planogram: dict[str, int]) -> list[str]:
    missing = [
        mapping.store_id
        for mapping in data.store_mappings
        if mapping.planogram_id not in rows_per_planogram
    ]
    if missing:
        logger.warning(f"{len(missing)} store(s) map to a planogram with no placement rows")
    return missing
