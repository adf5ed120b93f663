"""
Matching engine — resolves a scanned or typed query to candidate placements.

Strategies are tried in a fixed order; the first non-empty result wins and
results from different strategies are never merged:

  1. Delete-list check (always first).  Uses the exact cascade below against
     the planogram's delete list; a hit short-circuits with a DELETE outcome
     so a discontinued product is never reported as a valid placement.
  2. Fuzzy suffix search — manual keyboard entry only, normalized query of at
     most 4 digits.  Matches canonical UPCs ending with the query or with the
     query minus its last digit.  Scanner input is always full length, so a
     short scan is treated as a misread, not as a partial search.
  3. Exact cascade, each step only if the previous found nothing:
       a. canonical UPC == query
       b. canonical UPC == query without its trailing check digit
       c. canonical UPC without its trailing digit == query

All records matching the winning strategy are returned (one UPC can have
several facings), sorted by (bay, position).  Records with an unparseable bay
sort after every numbered bay.

This module is a pure query over the index: no state, no "in progress" flag.
Debouncing repeated decoder callbacks is the session's job.

Public API:
    find_candidates(query, index, from_scanner) → MatchResult
"""

import logging
from typing import Callable, Iterable, TypeVar

from analysis.models import (
    MatchOutcome,
    MatchResult,
    MatchStrategy,
    PlacementRecord,
)
from analysis.planogram_index import PlanogramIndex
from config.upc_rules import FUZZY_QUERY_MAX_DIGITS
from processing.upc_normalizer import normalize_upc, strip_check_digit

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# Exact cascade: (strategy, predicate(canonical, query)).
_EXACT_CASCADE: list[tuple[MatchStrategy, Callable[[str, str], bool]]] = [
    (
        MatchStrategy.EXACT,
        lambda canonical, query: canonical == query,
    ),
    (
        MatchStrategy.NO_CHECK_DIGIT,
        lambda canonical, query: len(query) > 1 and canonical == strip_check_digit(query),
    ),
    (
        MatchStrategy.DATA_CHECK_DIGIT,
        lambda canonical, query: len(canonical) > 1 and strip_check_digit(canonical) == query,
    ),
]


# ═══════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════

def find_candidates(
    query: str,
    index: PlanogramIndex,
    from_scanner: bool,
) -> MatchResult:
    """
    Resolve *query* against the planogram index.

    Args:
        query: Raw text from the scanner or the search box.
        index: Index of the active planogram (includes its delete list).
        from_scanner: True for decoder input; disables fuzzy suffix search.

    Returns:
        MatchResult with outcome DELETE, FOUND, or NOT_FOUND.  NOT_FOUND is a
        normal outcome, not an error.
    """
    normalized = normalize_upc(query)
    result = MatchResult(query=query, normalized_query=normalized)

    # ── 1. Delete list ───────────────────────────────────────────────────
    delete_strategy, delete_hits = _run_exact_cascade(
        normalized, index.delete_entries, key=lambda entry: entry.canonical_upc
    )
    if delete_hits:
        result.outcome = MatchOutcome.DELETE
        result.strategy = delete_strategy
        result.delete_entries = delete_hits
        logger.info(
            f"Query '{query}' → {normalized} is on the delete list for "
            f"'{index.planogram_id}' ({delete_strategy.value})"
        )
        return result

    # ── 2. Fuzzy suffix (manual entry only) ──────────────────────────────
    if not from_scanner and len(normalized) <= FUZZY_QUERY_MAX_DIGITS:
        fuzzy_hits = _suffix_matches(normalized, index.records)
        if fuzzy_hits:
            return _found(result, MatchStrategy.FUZZY_SUFFIX, fuzzy_hits)

    # ── 3. Exact cascade ─────────────────────────────────────────────────
    strategy, hits = _run_exact_cascade(
        normalized, index.records, key=lambda record: record.canonical_upc
    )
    if hits:
        return _found(result, strategy, hits)

    logger.info(
        f"Query '{query}' → {normalized}: not found in '{index.planogram_id}'"
    )
    return result


# ═══════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════

def _run_exact_cascade(
    normalized: str,
    items: Iterable[_T],
    key: Callable[[_T], str],
) -> tuple[MatchStrategy | None, list[_T]]:
    """Return the first cascade step with hits, and all of its hits."""
    items = list(items)

    for strategy, predicate in _EXACT_CASCADE:
        hits = [item for item in items if predicate(key(item), normalized)]
        if hits:
            return strategy, hits

    return None, []


def _suffix_matches(
    normalized: str,
    records: Iterable[PlacementRecord],
) -> list[PlacementRecord]:
    """Records whose canonical UPC ends with the query or the query minus one digit."""
    suffixes = [normalized]
    shortened = strip_check_digit(normalized)
    if shortened:
        suffixes.append(shortened)

    return [
        record for record in records
        if any(record.canonical_upc.endswith(suffix) for suffix in suffixes)
    ]


def _found(
    result: MatchResult,
    strategy: MatchStrategy,
    hits: list[PlacementRecord],
) -> MatchResult:
    result.outcome = MatchOutcome.FOUND
    result.strategy = strategy
    result.records = sorted(hits, key=_navigation_key)
    logger.info(
        f"Query '{result.query}' → {result.normalized_query}: "
        f"{len(hits)} placement(s) via {strategy.value}"
    )
    return result


def _navigation_key(record: PlacementRecord) -> tuple[int, int, int]:
    # Unparseable bays sort after every numbered bay.
    if record.bay_number is None:
        return (1, 0, record.position)
    return (0, record.bay_number, record.position)
