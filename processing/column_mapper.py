"""
Column mapper — renames raw CSV headers to the canonical column names.

Uses a three-step cascade:
  1. Exact match against known column names (case-insensitive)
  2. Known semantic renames (e.g. "ProductDescription" → "Description")
  3. Fuzzy match against the target column names (thefuzz, threshold 85)

Only columns in the requested target set are produced, so the same mapper
serves the planogram file, the store mapping, and the delete list.  Headers
that map to nothing are reported and ignored downstream.

Public API:
    map_columns(raw_columns, target_columns) → ColumnMappingResult
"""

import logging
from dataclasses import dataclass, field

from config.column_mapping import EXACT_MATCHES, KNOWN_RENAMES
from utils.fuzzy_match import best_match

logger = logging.getLogger(__name__)

_FUZZY_THRESHOLD = 85


# ═══════════════════════════════════════════════════════════════════════════
# Data class
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ColumnMappingResult:
    """Result of mapping raw headers to canonical column names."""

    mapping: dict[str, str | None] = field(default_factory=dict)
    """raw_name → canonical name, or None if unmapped."""

    unmapped: list[str] = field(default_factory=list)

    confidence: dict[str, int] = field(default_factory=dict)
    """raw_name → match confidence (100 = exact/known rename, 85-99 = fuzzy)."""

    def renames(self) -> dict[str, str]:
        """raw → canonical for mapped columns; first raw header wins per target."""
        renames: dict[str, str] = {}
        taken: set[str] = set()
        for raw_name, canonical in self.mapping.items():
            if canonical is None or canonical in taken:
                continue
            renames[raw_name] = canonical
            taken.add(canonical)
        return renames

    def missing(self, required: list[str]) -> list[str]:
        mapped = {c for c in self.mapping.values() if c is not None}
        return [col for col in required if col not in mapped]


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def map_columns(raw_columns: list[str], target_columns: list[str]) -> ColumnMappingResult:
    """
    Map raw CSV headers onto *target_columns*.

    Args:
        raw_columns: Header strings as read from the file.
        target_columns: Canonical names this file may contain.

    Returns:
        ColumnMappingResult with mapping, unmapped list, and confidence.
    """
    result = ColumnMappingResult()
    targets = set(target_columns)
    fuzzy_candidates = {col.lower(): col for col in target_columns}

    for raw_name in raw_columns:
        canonical, score = _map_single_column(str(raw_name), targets, fuzzy_candidates)

        result.mapping[raw_name] = canonical
        result.confidence[raw_name] = score

        if canonical is None:
            result.unmapped.append(raw_name)
            logger.debug(f"Unmapped column: '{raw_name}'")
        else:
            logger.debug(f"Mapped '{raw_name}' → '{canonical}' (confidence={score})")

    logger.info(
        f"Column mapping complete: {len(result.mapping)} columns processed, "
        f"{len(result.unmapped)} unmapped"
    )
    return result


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _map_single_column(
    raw_name: str,
    targets: set[str],
    fuzzy_candidates: dict[str, str],
) -> tuple[str | None, int]:
    normalized = raw_name.strip().lower()

    if not normalized:
        return None, 0

    # Step 1: Exact match
    canonical = EXACT_MATCHES.get(normalized)
    if canonical in targets:
        return canonical, 100

    # Step 2: Known rename
    canonical = KNOWN_RENAMES.get(normalized)
    if canonical in targets:
        return canonical, 100

    # Step 3: Fuzzy match against the target names
    canonical, score = best_match(normalized, fuzzy_candidates, threshold=_FUZZY_THRESHOLD)
    if canonical is not None:
        return canonical, score

    return None, 0
