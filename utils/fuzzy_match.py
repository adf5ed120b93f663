"""
Fuzzy string matching utilities.

Wraps thefuzz to give column_mapper a single best-match call for CSV headers
that are close to, but not exactly, a known column name (e.g. "Prodcut
Description" or "Bay No").
"""

import logging

from thefuzz import fuzz, process

logger = logging.getLogger(__name__)


def best_match(
    value: str,
    candidates: dict[str, str],
    threshold: int = 80,
) -> tuple[str | None, int]:
    """
    Find the best fuzzy match for *value* among *candidates* keys.

    Scores with token_sort_ratio so word order does not matter
    ("Description Product" still scores high against "product description").

    Args:
        value: The header text to match (lowercased internally).
        candidates: Dict of candidate_key (lowercase) → canonical_value.
        threshold: Minimum score (0-100) to accept a match.

    Returns:
        (canonical_value, score) if the best candidate reaches the threshold,
        otherwise (None, 0).
    """
    if not value or not value.strip() or not candidates:
        return None, 0

    value_lower = value.strip().lower()

    best = process.extractOne(
        value_lower,
        list(candidates.keys()),
        scorer=fuzz.token_sort_ratio,
    )
    if best is None:
        return None, 0

    candidate_key, score = best[0], best[1]

    if score >= threshold:
        logger.debug(
            f"Fuzzy matched header '{value}' → '{candidates[candidate_key]}' "
            f"(score={score})"
        )
        return candidates[candidate_key], score

    logger.debug(
        f"No fuzzy match for header '{value}' above threshold {threshold} "
        f"(best was '{candidate_key}' at {score})"
    )
    return None, 0
